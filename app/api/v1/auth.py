import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import AuthResponse, RefreshRequest, RefreshResponse, MessageResponse
from app.schemas.user import UserRegister, UserLogin, UserResponse
from app.services.users import register_user, login_user, logout_user, refresh_session
from app.api.deps import get_current_user_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Регистрация пользователя, сразу выдает пару токенов"""
    user, access_token, refresh_token = register_user(
        db,
        username=user_data.username,
        password=user_data.password,
        firstname=user_data.firstname,
        lastname=user_data.lastname,
    )
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    """Авторизация пользователя"""
    user, access_token, refresh_token = login_user(db, login_data.username, login_data.password)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Выход из системы - удаление refresh token"""
    logout_user(db, current_user_id)
    return MessageResponse(message="Logged out successfully")


@router.post("/refresh-token", response_model=RefreshResponse)
def refresh_token(
    refresh_data: RefreshRequest,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Новая пара токенов по refresh token (с ротацией)"""
    access_token, new_refresh_token = refresh_session(db, current_user_id, refresh_data.refresh_token)
    return RefreshResponse(access_token=access_token, refresh_token=new_refresh_token)
