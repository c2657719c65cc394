"""Local development setup: create tables and seed demo accounts."""
from userapi.db.session import Base, get_engine, get_session_factory
from userapi.db.models import User  # noqa: F401  (registers the users table)
from userapi.services.user_store import UserStore
from userapi.core.security import hash_password

DEMO_USERS = [
    ("Demo User", "demo@example.com", "demo123"),
    ("Second User", "second@example.com", "second123"),
]

# 1. Create all tables
engine = get_engine()
Base.metadata.create_all(bind=engine)
print("✅ All tables created")

session_factory = get_session_factory()
with session_factory() as db:
    store = UserStore(db)

    # 2. Demo accounts
    for name, email, password in DEMO_USERS:
        if store.find_by_email(email):
            print(f"  {email} already exists")
            continue
        store.create(name=name, email=email, hashed_password=hash_password(password))
        print(f"✅ Created {email} / {password}")

print("\n🎉 Database is ready to use!")
for _, email, password in DEMO_USERS:
    print(f"   {email:<22} / {password}")
