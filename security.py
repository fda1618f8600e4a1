import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext

from config import Settings
from database import Database
from dependencies import get_app_settings, get_db

logger = logging.getLogger(__name__)

ADMIN_COLLECTION = "admin"

# Use pbkdf2_sha256 to avoid external bcrypt dependency issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthenticationError(Exception):
    status_code = 401


class AdminNotFound(AuthenticationError):
    status_code = 404

    def __init__(self, email: str):
        super().__init__("Admin not found")
        self.email = email


class InvalidCredentials(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid credentials")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def find_admin(db: Database, email: str) -> Optional[dict]:
    return db.find_one(ADMIN_COLLECTION, {"email": normalize_email(email)})


def authenticate_admin(db: Database, email: str, password: str) -> dict:
    """Check an (email, password) pair against the stored hash.

    Raises AdminNotFound for an unknown email and InvalidCredentials for a
    wrong password. On success the admin's last_login is stamped.
    """
    admin = find_admin(db, email)
    if not admin:
        logger.warning("Login attempt for unknown admin %s", normalize_email(email))
        raise AdminNotFound(normalize_email(email))
    if not verify_password(password, admin["password_hash"]):
        logger.warning("Invalid password for admin %s", admin["email"])
        raise InvalidCredentials()
    db.update_document(ADMIN_COLLECTION, admin["id"], {"last_login": datetime.now(timezone.utc)})
    logger.info("Admin %s logged in", admin["email"])
    return admin


def change_password(db: Database, admin: dict, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, admin["password_hash"]):
        raise InvalidCredentials()
    db.update_document(ADMIN_COLLECTION, admin["id"], {"password_hash": hash_password(new_password)})
    logger.info("Password changed for admin %s", admin["email"])


def get_current_admin(
    authorization: Optional[str] = Header(None),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    email: str = payload.get("sub")
    role: str = payload.get("role")
    admin = find_admin(db, email) if email else None
    if admin is None or role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return admin
