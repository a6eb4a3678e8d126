from sqlalchemy.orm import Session

from app.errors import NotFound
from app.models.activity import Activity

ACTIVITY_NOT_FOUND = "Activity not found or access denied"


def can_access(caller_id: int, activity: Activity) -> bool:
    """Владелец видит свою активность, остальные только публичную"""
    return activity.user_id == caller_id or bool(activity.is_public)


def get_accessible_activity(db: Session, caller_id: int, activity_id: int) -> Activity:
    """Загрузить активность с проверкой доступа.

    Отсутствующая и чужая приватная активность дают одну и ту же ошибку,
    чтобы не раскрывать существование приватных активностей.
    """
    activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if activity is None or not can_access(caller_id, activity):
        raise NotFound(ACTIVITY_NOT_FOUND)
    return activity


def get_owned_activity(db: Session, caller_id: int, activity_id: int) -> Activity:
    """Активность, которую caller может изменять (только владелец)"""
    activity = get_accessible_activity(db, caller_id, activity_id)
    if activity.user_id != caller_id:
        raise NotFound(ACTIVITY_NOT_FOUND)
    return activity
