# app/config.py
"""Runtime configuration read from the environment (and `.env` if present)."""
import os
from dotenv import load_dotenv

load_dotenv()

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET not set")

JWT_ALGORITHM = "HS256"
TOKEN_EXPIRES_DAYS = int(os.getenv("TOKEN_EXPIRES_DAYS", 7))
ADMIN_TOKEN_EXPIRES_HOURS = int(os.getenv("ADMIN_TOKEN_EXPIRES_HOURS", 24))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# admin login is disabled while this is unset
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
