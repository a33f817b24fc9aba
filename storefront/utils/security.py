# storefront/utils/security.py
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from storefront.domain.errors import AuthError
from storefront.domain.ports import Identity
from storefront.utils.settings import JWT_SECRET, JWT_EXPIRE_HOURS

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def generate_token(user_id: str, role: str, expires_in: timedelta | None = None) -> str:
    expires = datetime.now(timezone.utc) + (expires_in or timedelta(hours=JWT_EXPIRE_HOURS))
    claims = {"userId": user_id, "role": role, "exp": expires}
    return jwt.encode(claims, JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> Identity:
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        raise AuthError("Invalid or expired token")

    user_id = claims.get("userId")
    role = claims.get("role")
    if not user_id or not role:
        raise AuthError("Could not parse token claims")
    return Identity(user_id=user_id, role=role)
