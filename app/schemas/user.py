from typing import Optional
from pydantic import Field, field_validator
from pydantic.networks import validate_email

from app.schemas.base import CamelModel


class UserRegister(CamelModel):
    username: str
    password: str = Field(min_length=8, max_length=50)
    firstname: Optional[str] = Field(default=None, max_length=50)
    lastname: Optional[str] = Field(default=None, max_length=50)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Логин должен быть email; сохраняется как введен, без нормализации"""
        if not 3 <= len(v) <= 255:
            raise ValueError("username must be between 3 and 255 characters")
        validate_email(v)
        return v


class UserLogin(CamelModel):
    username: str
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=8, max_length=50)
    new_password: str = Field(min_length=8, max_length=50)


class ProfileUpdate(CamelModel):
    firstname: Optional[str] = Field(default=None, max_length=50)
    lastname: Optional[str] = Field(default=None, max_length=50)


class AvatarConfirm(CamelModel):
    key: str = Field(min_length=1)
    content_type: str = Field(min_length=1)


class UserSummary(CamelModel):
    """Публичные данные пользователя во вложенных ответах"""
    id: int
    username: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    profile_picture_path: Optional[str] = None
    profile_picture_type: Optional[str] = None


class UserResponse(UserSummary):
    created_at: str
    updated_at: Optional[str] = None
