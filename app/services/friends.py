"""Заявки в друзья.

NONE -> PENDING -> ACCEPTED | REJECTED, PENDING -> NONE при отмене.
Пара пользователей неупорядоченная: запись ищется в обоих направлениях,
а уникальность пары обеспечивает ограничение uq_friends_pair.
"""
import logging
from typing import Optional

from sqlalchemy import or_, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.errors import NotFound, RelationshipConflict
from app.models.friend import Friend, PENDING, ACCEPTED, REJECTED
from app.models.user import User
from app.services.auth import get_current_timestamp

logger = logging.getLogger(__name__)

NONE = "NONE"
SENT = "SENT"
RECEIVED = "RECEIVED"

NO_PENDING_REQUEST = "No pending friend request found"
ALREADY_PENDING = "Friend request already pending"


def find_relationship(db: Session, user_id: int, other_id: int) -> Optional[Friend]:
    """Запись о паре в любом направлении"""
    return db.query(Friend).options(
        joinedload(Friend.requester),
        joinedload(Friend.target),
    ).filter(
        or_(
            and_(Friend.requester_id == user_id, Friend.target_id == other_id),
            and_(Friend.requester_id == other_id, Friend.target_id == user_id),
        )
    ).first()


def send_friend_request(db: Session, requester_id: int, target_id: int) -> Friend:
    if requester_id == target_id:
        raise RelationshipConflict("Cannot send friend request to yourself")

    target = db.query(User).filter(User.id == target_id).first()
    if target is None:
        raise NotFound("Target user not found")

    existing = find_relationship(db, requester_id, target_id)
    if existing is not None:
        if existing.status == PENDING:
            raise RelationshipConflict(ALREADY_PENDING)
        if existing.status == ACCEPTED:
            raise RelationshipConflict("Already friends with this user")
        if existing.status == REJECTED:
            if not settings.FRIEND_REREQUEST_AFTER_REJECT:
                raise RelationshipConflict("Friend request was rejected")
            # Старая отклоненная заявка заменяется новой в той же транзакции
            db.delete(existing)
            db.flush()

    friend_request = Friend(
        requester_id=requester_id,
        target_id=target_id,
        status=PENDING,
        created_at=get_current_timestamp(),
    )
    db.add(friend_request)
    try:
        db.commit()
    except IntegrityError:
        # Встречная заявка успела записаться между проверкой и вставкой
        db.rollback()
        logger.warning(f"Гонка заявок в друзья: {requester_id} <-> {target_id}")
        raise RelationshipConflict(ALREADY_PENDING)
    db.refresh(friend_request)

    logger.info(f"Заявка в друзья создана: ID={friend_request.id}, {requester_id} -> {target_id}")
    return friend_request


def _get_pending(db: Session, request_id: int, **party) -> Friend:
    friend_request = db.query(Friend).filter_by(id=request_id, status=PENDING, **party).first()
    if friend_request is None:
        raise NotFound(NO_PENDING_REQUEST)
    return friend_request


def cancel_friend_request(db: Session, requester_id: int, request_id: int) -> None:
    """Отменить свою заявку; чужая или уже обработанная заявка не найдена"""
    friend_request = _get_pending(db, request_id, requester_id=requester_id)
    db.delete(friend_request)
    db.commit()
    logger.info(f"Заявка в друзья отменена: ID={request_id}")


def _respond(db: Session, target_id: int, request_id: int, new_status: str) -> Friend:
    friend_request = _get_pending(db, request_id, target_id=target_id)
    friend_request.status = new_status
    friend_request.updated_at = get_current_timestamp()
    db.commit()
    db.refresh(friend_request)
    logger.info(f"Заявка в друзья ID={request_id}: {new_status}")
    return friend_request


def accept_friend_request(db: Session, target_id: int, request_id: int) -> Friend:
    return _respond(db, target_id, request_id, ACCEPTED)


def reject_friend_request(db: Session, target_id: int, request_id: int) -> Friend:
    return _respond(db, target_id, request_id, REJECTED)


def get_friendship_status(db: Session, user_id: int, other_id: int) -> dict:
    """Статус отношений; для PENDING добавляется направление относительно user_id"""
    friend_request = find_relationship(db, user_id, other_id)
    if friend_request is None:
        return {"status": NONE, "message": "No friend request exists"}

    result = {"status": friend_request.status, "request": friend_request}
    if friend_request.status == PENDING:
        result["direction"] = SENT if friend_request.requester_id == user_id else RECEIVED
    return result


def list_pending_requests(db: Session, user_id: int) -> list[Friend]:
    """Входящие заявки, новые первыми"""
    return db.query(Friend).options(
        joinedload(Friend.requester)
    ).filter(
        Friend.target_id == user_id,
        Friend.status == PENDING,
    ).order_by(Friend.created_at.desc(), Friend.id.desc()).all()


def list_friends(db: Session, user_id: int) -> list[User]:
    relationships = db.query(Friend).options(
        joinedload(Friend.requester),
        joinedload(Friend.target),
    ).filter(
        Friend.status == ACCEPTED,
        or_(Friend.requester_id == user_id, Friend.target_id == user_id),
    ).order_by(Friend.updated_at.desc(), Friend.id.desc()).all()

    return [
        rel.target if rel.requester_id == user_id else rel.requester
        for rel in relationships
    ]
