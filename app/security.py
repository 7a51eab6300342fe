# app/security.py
"""Password hashing and signed session credentials."""
import datetime as dt

import bcrypt
import jwt

from . import config

USER_TOKEN = "user"
ADMIN_TOKEN = "admin"

def hash_password(plain: str) -> str:
    # returns a utf-8 str like "$2b$10$..."
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(plain.encode("utf-8"), salt)
    return hashed.decode("utf-8")

def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False

def create_user_token(user_id: int, mobile: str) -> str:
    """Create a user session credential valid for TOKEN_EXPIRES_DAYS."""
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "mobile": mobile,
        "type": USER_TOKEN,
        "iat": now,
        "exp": now + dt.timedelta(days=config.TOKEN_EXPIRES_DAYS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def create_admin_token(username: str) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": username,
        "type": ADMIN_TOKEN,
        "iat": now,
        "exp": now + dt.timedelta(hours=config.ADMIN_TOKEN_EXPIRES_HOURS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def decode_token(token: str) -> dict:
    """Verify signature and expiry; raises jwt.PyJWTError on failure."""
    return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])

def bearer_token(authorization: str | None) -> str | None:
    """Extract the credential from an `Authorization: Bearer ...` header.

    Browsers that serialize an empty local store send the literal strings
    "null" or "undefined"; those count as no credential.
    """
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    if not token or token in ("null", "undefined"):
        return None
    return token
