"""Authentication endpoints (cookie-based session token)"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cowork.config import settings
from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.errors import Conflict, CoworkError, NotFound
from cowork.models import User
from cowork.schemas import MessageResponse, UserCreate, UserEnvelope, UserLogin, UserResponse
from cowork.security import create_access_token, get_password_hash, verify_password

router = APIRouter()
logger = logging.getLogger(__name__)


def _set_session_cookie(response: Response, user: User) -> None:
    token = create_access_token(user.id, user.email)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, response: Response, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == user_in.email).first():
        raise Conflict("User already exists")

    user = User(
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
        full_name=user_in.full_name,
        preferred_lang=user_in.preferred_lang,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _set_session_cookie(response, user)
    logger.info("user registered", extra={"user_id": user.id})
    return UserEnvelope(user=UserResponse.model_validate(user), message="Registered successfully")


@router.post("/login", response_model=UserEnvelope)
def login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise CoworkError("Invalid credentials")

    _set_session_cookie(response, user)
    return UserEnvelope(user=UserResponse.model_validate(user), message="Logged in successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
def me(caller: CallerIdentity = Depends(get_current_caller), db: Session = Depends(get_db)):
    user = db.get(User, caller.id)
    if user is None:
        raise NotFound("User not found")
    return UserEnvelope(user=UserResponse.model_validate(user))
