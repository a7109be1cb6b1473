import hashlib
import logging
import os
import secrets
from datetime import datetime, timedelta, timezone

import jwt
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 120_000
TOKEN_TTL = timedelta(hours=1)
JWT_ALGORITHM = "HS256"

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    logger.warning("JWT_SECRET is not set; using an insecure development secret")
    JWT_SECRET = "dev-secret-change-me"


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS).hex()
    return f"{PBKDF2_ITERATIONS}:{salt.hex()}:{digest}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        iterations, salt_hex, stored_digest = hashed_password.split(":", 2)
        salt = bytes.fromhex(salt_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    computed = hashlib.pbkdf2_hmac("sha256", plain_password.encode(), salt, rounds).hex()
    return secrets.compare_digest(computed, stored_digest)


def create_access_token(
    identity_id: str,
    role: str,
    username: str,
    name: str,
    expires_delta: timedelta = TOKEN_TTL,
) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "id": identity_id,
        "role": role,
        "username": username,
        "name": name,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the token claims; raises ``jwt.InvalidTokenError`` (expired included)."""
    return jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["exp", "id", "role"]},
    )
