from typing import Optional
from pydantic import Field, field_validator

from app.schemas.base import CamelModel, IsoDateTime
from app.schemas.user import UserSummary


class LocationIn(CamelModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    altitude: Optional[float] = None
    timestamp: IsoDateTime
    accuracy: Optional[float] = None
    speed: Optional[float] = None


class LocationResponse(LocationIn):
    id: int


class ActivityCreate(CamelModel):
    type: str = Field(min_length=1, max_length=50)
    start_time: IsoDateTime
    end_time: IsoDateTime
    distance: float = Field(ge=0)
    duration: float = Field(ge=0)
    avg_speed: float = Field(ge=0)
    max_speed: float = Field(ge=0)
    calories: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_public: bool = False
    locations: list[LocationIn]


class ActivityUpdate(CamelModel):
    """PATCH: обновляются только переданные поля"""
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    start_time: Optional[IsoDateTime] = None
    end_time: Optional[IsoDateTime] = None
    distance: Optional[float] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    avg_speed: Optional[float] = Field(default=None, ge=0)
    max_speed: Optional[float] = Field(default=None, ge=0)
    calories: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_public: Optional[bool] = None
    locations: Optional[list[LocationIn]] = None


class InteractionCounts(CamelModel):
    comments: int = 0
    likes: int = 0


class ActivityResponse(CamelModel):
    id: int
    user_id: int
    type: str
    start_time: str
    end_time: str
    distance: float
    duration: float
    avg_speed: float
    max_speed: float
    calories: Optional[float] = None
    description: Optional[str] = None
    is_public: bool
    created_at: str
    updated_at: Optional[str] = None
    locations: list[LocationResponse] = []
    counts: Optional[InteractionCounts] = None


class Pagination(CamelModel):
    total: int
    total_pages: int
    current_page: int
    limit: int
    has_next_page: bool
    has_previous_page: bool
    requested_page: int
    requested_limit: int


class ActivitiesListResponse(CamelModel):
    activities: list[ActivityResponse]
    pagination: Pagination


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=1000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment cannot be empty")
        return v


class CommentResponse(CamelModel):
    id: int
    activity_id: int
    user_id: int
    content: str
    created_at: str
    updated_at: Optional[str] = None
    user: Optional[UserSummary] = None


class LikeStatusResponse(CamelModel):
    liked: bool
    like_count: int


class LikeResponse(CamelModel):
    message: str
    like_count: int
