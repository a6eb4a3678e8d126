from typing import Optional
from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.user import UserSummary


class FriendRequestCreate(CamelModel):
    target_user_id: int = Field(gt=0)


class FriendRequestResponse(CamelModel):
    id: int
    requester_id: int
    target_id: int
    status: str
    created_at: str
    updated_at: Optional[str] = None
    requester: Optional[UserSummary] = None
    target: Optional[UserSummary] = None


class FriendshipStatusResponse(CamelModel):
    status: str
    direction: Optional[str] = None
    message: Optional[str] = None
    request: Optional[FriendRequestResponse] = None
