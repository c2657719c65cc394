"""Password hashing and JWT token utilities."""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
import bcrypt

from userapi.config import settings

TOKEN_TYPE = "Bearer"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

# ── Password hashing ──────────────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    """Salted bcrypt hash of *plain*, as stored in ``users.hashed_password``.

    Request validation caps passwords at ``BCRYPT_MAX_BYTES``; anything longer
    reaching this point is a programming error, not user input.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password exceeds {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """True when *plain* matches the stored *hashed* value.

    Malformed hashes and over-long passwords are refused by bcrypt with a
    ValueError; both simply count as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# ── JWT tokens ────────────────────────────────────────────────────────────────


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token.

    Every token carries a random ``jti`` so two tokens issued for the same
    user within the same second still differ.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "iat": now, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT. Returns payload dict or None on failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ── Credential service ────────────────────────────────────────────────────────


class CredentialService:
    """Hashing and token issuance as consumed by the user handler."""

    def hash(self, plain: str) -> str:
        return hash_password(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def issue_token(self, user_id: uuid.UUID) -> str:
        return create_access_token(data={"sub": str(user_id)})

    def decode(self, token: str) -> uuid.UUID | None:
        """Return the user id a token was issued for, or None if it is unusable."""
        payload = decode_access_token(token)
        if payload is None:
            return None
        subject = payload.get("sub")
        if subject is None:
            return None
        try:
            return uuid.UUID(subject)
        except ValueError:
            return None
