"""API route package — imports all routers for main.py."""

from userapi.api.health import router as health_router  # noqa: F401
from userapi.api.users import auth_router  # noqa: F401
from userapi.api.users import router as users_router  # noqa: F401
