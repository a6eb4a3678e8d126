from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.activity import CommentCreate, CommentResponse
from app.schemas.auth import MessageResponse
from app.services import comments as comment_service
from app.api.deps import get_current_user_id

router = APIRouter()


@router.get("", response_model=list[CommentResponse])
def get_comments(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return comment_service.list_comments(db, current_user_id, activity_id)


@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(
    activity_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return comment_service.get_comment(db, current_user_id, activity_id, comment_id)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    activity_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return comment_service.create_comment(db, current_user_id, activity_id, data.content)


@router.patch("/{comment_id}", response_model=CommentResponse)
def update_comment(
    activity_id: int,
    comment_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Изменить свой комментарий"""
    return comment_service.update_comment(db, current_user_id, activity_id, comment_id, data.content)


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    activity_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Удалить свой комментарий"""
    comment_service.delete_comment(db, current_user_id, activity_id, comment_id)
    return MessageResponse(message="Comment deleted successfully")
