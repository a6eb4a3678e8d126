from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.user import UserResponse


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class RefreshResponse(CamelModel):
    access_token: str
    refresh_token: str


class MessageResponse(CamelModel):
    message: str
