# workforce/core/security.py
# Handles password hashing, JWTs, and the role-checking dependencies.
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone

from workforce.db import models, session
from workforce.core.config import settings
from workforce.core.exceptions import Forbidden
from workforce.schemas import token as token_schema

logger = logging.getLogger(__name__)

# --- Password Hashing ---
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
def verify_password(plain: str, hashed: str) -> bool: return pwd_context.verify(plain, hashed)
def get_password_hash(pwd: str) -> str: return pwd_context.hash(pwd)

# --- JWT Creation ---
def create_access_token(user: models.User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user.id), "role": user.role, "email": user.email, "name": user.name, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> token_schema.TokenData:
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    sub = payload.get("sub")
    if sub is None:
        raise JWTError("missing subject")
    return token_schema.TokenData(user_id=int(sub), role=payload.get("role"))

def authenticate_user(db: Session, email: str, password: str) -> models.User | None:
    user = db.query(models.User).filter(models.User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user

def require_admin(user: models.User) -> None:
    """Raise Forbidden unless the verified user holds the Admin role."""
    if not user.is_admin:
        raise Forbidden()

# --- Role-Checking Dependencies ---
# The cookie set at login is preferred; a bearer header works for API clients.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)

def get_current_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    db: Session = Depends(session.get_db),
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    # a stale cookie must not shadow a valid bearer header
    token_data = None
    for token in (request.cookies.get(settings.AUTH_COOKIE_NAME), bearer):
        if not token:
            continue
        try:
            token_data = decode_access_token(token)
            break
        except (JWTError, ValueError):
            logger.info("Rejected invalid or expired token")
    if token_data is None:
        raise credentials_exception

    # the database, not the token, is the source of truth for the role
    user = db.query(models.User).filter(models.User.id == token_data.user_id).first()
    if user is None:
        raise credentials_exception
    return user

def get_current_admin_user(current_user: models.User = Depends(get_current_user)) -> models.User:
    require_admin(current_user)
    return current_user
