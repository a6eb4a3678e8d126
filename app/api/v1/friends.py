from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import MessageResponse
from app.schemas.friend import FriendRequestCreate, FriendRequestResponse, FriendshipStatusResponse
from app.schemas.user import UserSummary
from app.services import friends as friend_service
from app.api.deps import get_current_user_id

router = APIRouter()


@router.get("", response_model=list[UserSummary])
def list_friends(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Список друзей (принятые заявки в обе стороны)"""
    return friend_service.list_friends(db, current_user_id)


@router.post("/requests", response_model=FriendRequestResponse, status_code=status.HTTP_201_CREATED)
def create_friend_request(
    data: FriendRequestCreate,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Отправить заявку в друзья"""
    return friend_service.send_friend_request(db, current_user_id, data.target_user_id)


@router.get("/requests/pending", response_model=list[FriendRequestResponse])
def get_pending_friend_requests(
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Входящие заявки, ожидающие ответа"""
    return friend_service.list_pending_requests(db, current_user_id)


@router.delete("/requests/{request_id}", response_model=MessageResponse)
def delete_friend_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Отменить отправленную заявку"""
    friend_service.cancel_friend_request(db, current_user_id, request_id)
    return MessageResponse(message="Friend request cancelled successfully")


@router.post("/requests/{request_id}/accept", response_model=FriendRequestResponse)
def accept_friend_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    return friend_service.accept_friend_request(db, current_user_id, request_id)


@router.post("/requests/{request_id}/reject", response_model=MessageResponse)
def reject_friend_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    friend_service.reject_friend_request(db, current_user_id, request_id)
    return MessageResponse(message="Friend request rejected successfully")


@router.get(
    "/status/{user_id}",
    response_model=FriendshipStatusResponse,
    response_model_exclude_none=True,
)
def get_friendship_status(
    user_id: int,
    db: Session = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    """Статус отношений с пользователем; direction только для PENDING"""
    return friend_service.get_friendship_status(db, current_user_id, user_id)
