import logging
import math
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.models.activity import Activity, Comment, Like, Location
from app.services.access import get_accessible_activity, get_owned_activity
from app.services.auth import get_current_timestamp, to_utc_iso

logger = logging.getLogger(__name__)

ACTIVITY_FIELDS = (
    "type",
    "start_time",
    "end_time",
    "distance",
    "duration",
    "avg_speed",
    "max_speed",
    "calories",
    "description",
    "is_public",
)

NULLABLE_FIELDS = ("calories", "description")

# Время хранится в UTC (to_utc_iso): фильтры и сортировка работают по тексту
TIME_FIELDS = ("start_time", "end_time")


def _build_locations(locations: list[dict]) -> list[Location]:
    return [
        Location(**{**location, "timestamp": to_utc_iso(location["timestamp"])})
        for location in locations
    ]


def _field_value(field: str, value):
    if field in TIME_FIELDS and value is not None:
        return to_utc_iso(value)
    return value


def count_interactions(db: Session, activity_ids: list[int]) -> dict[int, dict[str, int]]:
    """Количество комментариев и лайков по активностям"""
    counts = {activity_id: {"comments": 0, "likes": 0} for activity_id in activity_ids}
    if not activity_ids:
        return counts

    for model, key in ((Comment, "comments"), (Like, "likes")):
        rows = db.query(model.activity_id, func.count(model.id)).filter(
            model.activity_id.in_(activity_ids)
        ).group_by(model.activity_id).all()
        for activity_id, total in rows:
            counts[activity_id][key] = total
    return counts


def list_activities(
    db: Session,
    user_id: int,
    page: int = 1,
    limit: Optional[int] = None,
    activity_type: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> dict:
    """Активности пользователя с пагинацией, новые первыми"""
    requested_page = page
    requested_limit = limit or settings.ACTIVITIES_DEFAULT_LIMIT
    page = max(1, abs(page or 1))
    limit = min(settings.ACTIVITIES_MAX_LIMIT, max(1, abs(requested_limit)))

    query = db.query(Activity).filter(Activity.user_id == user_id)
    if activity_type:
        query = query.filter(Activity.type == activity_type)
    if start_date and end_date:
        query = query.filter(
            Activity.start_time >= to_utc_iso(start_date),
            Activity.start_time <= to_utc_iso(end_date),
        )

    total = query.count()
    activities = query.options(
        selectinload(Activity.locations)
    ).order_by(Activity.start_time.desc(), Activity.id.desc()).offset((page - 1) * limit).limit(limit).all()

    total_pages = math.ceil(total / limit)
    return {
        "activities": activities,
        "counts": count_interactions(db, [activity.id for activity in activities]),
        "pagination": {
            "total": total,
            "total_pages": total_pages,
            "current_page": page,
            "limit": limit,
            "has_next_page": page < total_pages,
            "has_previous_page": page > 1,
            "requested_page": requested_page,
            "requested_limit": requested_limit,
        },
    }


def get_activity(db: Session, user_id: int, activity_id: int) -> Activity:
    return get_accessible_activity(db, user_id, activity_id)


def create_activity(db: Session, user_id: int, data: dict) -> Activity:
    """Активность и ее точки записываются одним коммитом"""
    activity = Activity(
        user_id=user_id,
        created_at=get_current_timestamp(),
        **{field: _field_value(field, data[field]) for field in ACTIVITY_FIELDS if field in data},
    )
    activity.locations = _build_locations(data.get("locations") or [])
    db.add(activity)
    db.commit()
    db.refresh(activity)

    logger.info(f"Создана активность: ID={activity.id}, type='{activity.type}', user={user_id}, locations={len(activity.locations)}")
    return activity


def update_activity(db: Session, user_id: int, activity_id: int, changes: dict) -> Activity:
    """Частичное обновление; переданные locations полностью заменяют старые"""
    activity = get_owned_activity(db, user_id, activity_id)

    for field in ACTIVITY_FIELDS:
        if field not in changes:
            continue
        if changes[field] is None and field not in NULLABLE_FIELDS:
            continue
        setattr(activity, field, _field_value(field, changes[field]))
    if changes.get("locations") is not None:
        # delete-orphan удаляет старые точки при flush, в той же транзакции
        activity.locations = _build_locations(changes["locations"])
    activity.updated_at = get_current_timestamp()

    db.commit()
    db.refresh(activity)
    logger.info(f"Обновлена активность: ID={activity.id}, user={user_id}")
    return activity


def delete_activity(db: Session, user_id: int, activity_id: int) -> None:
    activity = get_owned_activity(db, user_id, activity_id)
    db.delete(activity)
    db.commit()
    logger.info(f"Удалена активность: ID={activity_id}, user={user_id}")
