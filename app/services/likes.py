import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import Conflict, NotFound
from app.models.activity import Like
from app.services.access import get_accessible_activity
from app.services.auth import get_current_timestamp

logger = logging.getLogger(__name__)

ALREADY_LIKED = "Activity already liked"


def _like_count(db: Session, activity_id: int) -> int:
    return db.query(Like).filter(Like.activity_id == activity_id).count()


def _find_like(db: Session, user_id: int, activity_id: int):
    return db.query(Like).filter(Like.activity_id == activity_id, Like.user_id == user_id).first()


def get_like_status(db: Session, user_id: int, activity_id: int) -> dict:
    get_accessible_activity(db, user_id, activity_id)
    return {
        "liked": _find_like(db, user_id, activity_id) is not None,
        "like_count": _like_count(db, activity_id),
    }


def like_activity(db: Session, user_id: int, activity_id: int) -> dict:
    get_accessible_activity(db, user_id, activity_id)
    if _find_like(db, user_id, activity_id) is not None:
        raise Conflict(ALREADY_LIKED)

    db.add(Like(activity_id=activity_id, user_id=user_id, created_at=get_current_timestamp()))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(ALREADY_LIKED)

    return {"message": "Activity liked successfully", "like_count": _like_count(db, activity_id)}


def unlike_activity(db: Session, user_id: int, activity_id: int) -> dict:
    get_accessible_activity(db, user_id, activity_id)
    like = _find_like(db, user_id, activity_id)
    if like is None:
        raise NotFound("Like not found")

    db.delete(like)
    db.commit()
    return {"message": "Activity unliked successfully", "like_count": _like_count(db, activity_id)}
