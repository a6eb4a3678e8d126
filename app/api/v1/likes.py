from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.activity import LikeStatusResponse, LikeResponse
from app.services import likes as like_service
from app.api.deps import get_current_user_id

router = APIRouter()


@router.get("", response_model=LikeStatusResponse)
def get_like_status(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Лайкнул ли текущий пользователь и общее число лайков"""
    return like_service.get_like_status(db, current_user_id, activity_id)


@router.post("", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
def like_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return like_service.like_activity(db, current_user_id, activity_id)


@router.delete("", response_model=LikeResponse)
def unlike_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return like_service.unlike_activity(db, current_user_id, activity_id)
