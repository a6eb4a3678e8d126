import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pytz import timezone, utc
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import Unauthenticated
from app.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Хеш для сравнения, когда пользователь не найден: время ответа не выдает наличие логина
_DUMMY_PASSWORD_HASH = pwd_context.hash("rythmrun-dummy-password")


class InvalidTokenError(Unauthenticated):
    message = "Invalid token"


class TokenExpiredError(InvalidTokenError):
    message = "Token expired"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Неизвестный или поврежденный формат хеша
        return False


def get_password_hash(password: str) -> str:
    """Хеширование пароля"""
    return pwd_context.hash(password)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """Проверка логина/пароля; None и для неизвестного логина, и для неверного пароля"""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_password(password, _DUMMY_PASSWORD_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def _create_token(user_id: int, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(utc)
    to_encode = {
        "userId": user_id,
        "iat": now,
        "exp": now + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Создание access токена (по умолчанию 1 час)"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(user_id, settings.ACCESS_SECRET, expires_delta)


def create_refresh_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Создание refresh токена (по умолчанию 7 дней), подписан отдельным ключом"""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _create_token(user_id, settings.REFRESH_SECRET, expires_delta)


def _decode_token(token: str, secret: str) -> dict:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise InvalidTokenError()
    return payload


def decode_access_token(token: str) -> dict:
    """Декодирование access токена; TokenExpiredError / InvalidTokenError при ошибке"""
    return _decode_token(token, settings.ACCESS_SECRET)


def decode_refresh_token(token: str) -> dict:
    """Декодирование refresh токена"""
    return _decode_token(token, settings.REFRESH_SECRET)


def get_token_expiry(payload: dict) -> datetime:
    """Срок действия токена из claim exp в часовом поясе приложения"""
    tz = timezone(settings.TIMEZONE)
    return datetime.fromtimestamp(payload["exp"], tz)


def get_current_timestamp() -> str:
    """Получить текущий timestamp в ISO формате"""
    tz = timezone(settings.TIMEZONE)
    return datetime.now(tz).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Разбор ISO timestamp; без часового пояса считаем UTC"""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = utc.localize(parsed)
    return parsed


def format_utc(value: datetime) -> str:
    """Единый формат хранения: UTC с микросекундами, строки сравнимы как текст"""
    if value.tzinfo is None:
        value = utc.localize(value)
    return value.astimezone(utc).isoformat(timespec="microseconds")


def to_utc_iso(value: str) -> str:
    """ISO строка с любым смещением -> формат хранения в UTC"""
    return format_utc(parse_timestamp(value))
