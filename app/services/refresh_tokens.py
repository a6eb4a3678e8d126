"""Хранилище refresh токенов: одна активная сессия на пользователя.

Запись перезаписывается при логине и при ротации, удаляется при logout
и смене пароля. expires_at хранится в UTC в едином формате (format_utc),
поэтому сроки сравниваются прямо в SQL.
"""
import hmac
import logging
from datetime import datetime, timedelta
from typing import Optional

from pytz import utc
from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import Unauthenticated
from app.models.refresh_token import RefreshToken
from app.services.auth import format_utc, get_current_timestamp

logger = logging.getLogger(__name__)


class RefreshTokenError(Unauthenticated):
    message = "Invalid refresh token"


class RefreshTokenNotFound(RefreshTokenError):
    pass


class RefreshTokenMismatch(RefreshTokenError):
    pass


class RefreshTokenExpired(RefreshTokenError):
    pass


def _expiry(expires_at: Optional[datetime]) -> str:
    if expires_at is None:
        expires_at = datetime.now(utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return format_utc(expires_at)


def _now() -> str:
    return format_utc(datetime.now(utc))


def save_refresh_token(
    db: Session, user_id: int, token: str, expires_at: Optional[datetime] = None
) -> RefreshToken:
    """Сохранить refresh token пользователя, заменив предыдущий (upsert по user_id)"""
    expires_at_str = _expiry(expires_at)
    timestamp = get_current_timestamp()

    record = db.query(RefreshToken).filter(RefreshToken.user_id == user_id).first()
    if record is None:
        record = RefreshToken(user_id=user_id, token=token, expires_at=expires_at_str, created_at=timestamp)
        db.add(record)
    else:
        record.token = token
        record.expires_at = expires_at_str
        record.created_at = timestamp
    db.commit()
    db.refresh(record)
    return record


def consume_refresh_token(db: Session, user_id: int, presented_token: str) -> RefreshToken:
    """Найти действующую запись пользователя, совпадающую с предъявленным токеном"""
    record = db.query(RefreshToken).filter(RefreshToken.user_id == user_id).first()
    if record is None:
        raise RefreshTokenNotFound()
    if not hmac.compare_digest(record.token.encode(), presented_token.encode()):
        raise RefreshTokenMismatch()
    if record.expires_at <= _now():
        raise RefreshTokenExpired()
    return record


def rotate_refresh_token(
    db: Session, user_id: int, old_token: str, new_token: str, expires_at: Optional[datetime] = None
) -> bool:
    """Заменить токен только если в БД все еще old_token (compare-and-swap).

    False означает, что параллельная ротация уже заменила токен.
    """
    result = db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id, RefreshToken.token == old_token)
        .values(token=new_token, expires_at=_expiry(expires_at), created_at=get_current_timestamp())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def revoke_refresh_token(db: Session, user_id: int) -> None:
    """Удалить refresh token пользователя; отсутствие записи не ошибка"""
    db.execute(
        delete(RefreshToken)
        .where(RefreshToken.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()


def cleanup_expired_tokens(db: Session, user_id: Optional[int] = None) -> int:
    """Очистка истекших токенов. Возвращает количество удаленных токенов"""
    statement = delete(RefreshToken).where(RefreshToken.expires_at <= _now())
    if user_id is not None:
        statement = statement.where(RefreshToken.user_id == user_id)

    result = db.execute(statement.execution_options(synchronize_session=False))
    db.commit()
    if result.rowcount:
        logger.info(f"Удалено истекших refresh токенов: {result.rowcount}")
    return result.rowcount
