from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.user import UserResponse, ProfileUpdate, ChangePasswordRequest, AvatarConfirm
from app.services.users import update_profile, change_password, set_profile_picture
from app.api.deps import get_current_user

router = APIRouter()
avatar_router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Профиль текущего пользователя"""
    return current_user


@router.put("/profile", response_model=UserResponse)
def update_profile_endpoint(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Обновить имя/фамилию"""
    return update_profile(db, current_user, profile_data.model_dump(exclude_unset=True))


@router.put("/change-password", response_model=MessageResponse)
def change_password_endpoint(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Смена пароля; после нее нужно войти заново"""
    change_password(db, current_user, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")


@avatar_router.post("/confirm", response_model=UserResponse)
def confirm_avatar_upload(
    data: AvatarConfirm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Подтверждение загрузки аватара: сохраняем ключ объекта и тип"""
    return set_profile_picture(db, current_user, data.key, data.content_type)
