# workforce/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from workforce.core import security
from workforce.core.config import settings
from workforce.db import models, session
from workforce.schemas import token as token_schema
from workforce.schemas import user as user_schema

logger = logging.getLogger(__name__)

router = APIRouter()

def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

@router.post("/login", response_model=user_schema.LoginResponse)
def login(credentials: user_schema.LoginRequest, response: Response, db: Session = Depends(session.get_db)):
    """ Verifies email/password and sets the session cookie. """
    user = security.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.info("Failed login for %s", credentials.email)
        raise _invalid_credentials()

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=security.create_access_token(user),
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("User %s logged in", user.id)
    return {"user": user}

@router.post("/token", response_model=token_schema.Token)
def login_for_token(db: Session = Depends(session.get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    """ OAuth2 password flow for API clients; returns a bearer token instead of a cookie. """
    user = security.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise _invalid_credentials()
    return {"access_token": security.create_access_token(user), "token_type": "bearer"}

@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"success": True}

@router.get("/me", response_model=user_schema.LoginResponse)
def read_me(current_user: models.User = Depends(security.get_current_user)):
    return {"user": current_user}
