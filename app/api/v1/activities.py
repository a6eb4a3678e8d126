from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.activity import Activity
from app.schemas.activity import (
    ActivityCreate,
    ActivityUpdate,
    ActivityResponse,
    ActivitiesListResponse,
    InteractionCounts,
    Pagination,
)
from app.schemas.auth import MessageResponse
from app.schemas.base import IsoDateTime
from app.services import activities as activity_service
from app.api.deps import get_current_user_id

router = APIRouter()


def build_activity_response(activity: Activity, counts: Optional[dict] = None) -> ActivityResponse:
    response = ActivityResponse.model_validate(activity)
    if counts is not None:
        response.counts = InteractionCounts(**counts)
    return response


@router.get("", response_model=ActivitiesListResponse)
def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    type: Optional[str] = Query(None),
    start_date: Optional[IsoDateTime] = Query(None, alias="startDate"),
    end_date: Optional[IsoDateTime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Активности текущего пользователя с пагинацией (limit не больше 50)
    """
    result = activity_service.list_activities(
        db,
        current_user_id,
        page=page,
        limit=limit,
        activity_type=type,
        start_date=start_date,
        end_date=end_date,
    )
    return ActivitiesListResponse(
        activities=[
            build_activity_response(activity, result["counts"][activity.id])
            for activity in result["activities"]
        ],
        pagination=Pagination(**result["pagination"]),
    )


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Активность: своя или публичная"""
    activity = activity_service.get_activity(db, current_user_id, activity_id)
    counts = activity_service.count_interactions(db, [activity.id])[activity.id]
    return build_activity_response(activity, counts)


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(
    activity_data: ActivityCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Создать активность вместе с точками маршрута"""
    activity = activity_service.create_activity(db, current_user_id, activity_data.model_dump())
    return build_activity_response(activity)


@router.patch("/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: int,
    activity_data: ActivityUpdate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Обновить активность (только владелец)"""
    activity = activity_service.update_activity(
        db, current_user_id, activity_id, activity_data.model_dump(exclude_unset=True)
    )
    return build_activity_response(activity)


@router.delete("/{activity_id}", response_model=MessageResponse)
def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Удалить активность (только владелец)"""
    activity_service.delete_activity(db, current_user_id, activity_id)
    return MessageResponse(message="Activity deleted successfully")
