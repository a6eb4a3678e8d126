import logging

from sqlalchemy.orm import Session, joinedload

from app.errors import NotFound
from app.models.activity import Comment
from app.services.access import get_accessible_activity
from app.services.auth import get_current_timestamp

logger = logging.getLogger(__name__)

COMMENT_NOT_FOUND = "Comment not found or unauthorized"


def list_comments(db: Session, user_id: int, activity_id: int) -> list[Comment]:
    get_accessible_activity(db, user_id, activity_id)
    return db.query(Comment).options(
        joinedload(Comment.user)
    ).filter(Comment.activity_id == activity_id).order_by(Comment.created_at, Comment.id).all()


def get_comment(db: Session, user_id: int, activity_id: int, comment_id: int) -> Comment:
    get_accessible_activity(db, user_id, activity_id)
    comment = db.query(Comment).filter(
        Comment.id == comment_id,
        Comment.activity_id == activity_id,
    ).first()
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def create_comment(db: Session, user_id: int, activity_id: int, content: str) -> Comment:
    get_accessible_activity(db, user_id, activity_id)
    comment = Comment(
        activity_id=activity_id,
        user_id=user_id,
        content=content,
        created_at=get_current_timestamp(),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(f"Комментарий ID={comment.id} к активности ID={activity_id}, user={user_id}")
    return comment


def _get_own_comment(db: Session, user_id: int, activity_id: int, comment_id: int) -> Comment:
    get_accessible_activity(db, user_id, activity_id)
    comment = db.query(Comment).filter(
        Comment.id == comment_id,
        Comment.activity_id == activity_id,
        Comment.user_id == user_id,
    ).first()
    if comment is None:
        raise NotFound(COMMENT_NOT_FOUND)
    return comment


def update_comment(db: Session, user_id: int, activity_id: int, comment_id: int, content: str) -> Comment:
    comment = _get_own_comment(db, user_id, activity_id, comment_id)
    comment.content = content
    comment.updated_at = get_current_timestamp()
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, user_id: int, activity_id: int, comment_id: int) -> None:
    comment = _get_own_comment(db, user_id, activity_id, comment_id)
    db.delete(comment)
    db.commit()
