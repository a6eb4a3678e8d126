import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import Conflict, NotFound, Unauthenticated
from app.models.user import User
from app.services.auth import (
    InvalidTokenError,
    authenticate_user,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_current_timestamp,
    get_password_hash,
    get_token_expiry,
    verify_password,
)
from app.services.refresh_tokens import (
    RefreshTokenError,
    RefreshTokenMismatch,
    cleanup_expired_tokens,
    consume_refresh_token,
    revoke_refresh_token,
    rotate_refresh_token,
    save_refresh_token,
)

logger = logging.getLogger(__name__)

USERNAME_EXISTS = "Username already exists"


def issue_session(db: Session, user_id: int) -> tuple[str, str]:
    """Новая пара токенов; refresh token заменяет сохраненный ранее"""
    access_token = create_access_token(user_id)
    refresh_token = create_refresh_token(user_id)
    expires_at = get_token_expiry(decode_refresh_token(refresh_token))
    save_refresh_token(db, user_id, refresh_token, expires_at)
    return access_token, refresh_token


def register_user(
    db: Session,
    username: str,
    password: str,
    firstname: Optional[str] = None,
    lastname: Optional[str] = None,
) -> tuple[User, str, str]:
    existing_user = db.query(User).filter(User.username == username).first()
    if existing_user:
        raise Conflict(USERNAME_EXISTS)

    user = User(
        username=username,
        password_hash=get_password_hash(password),
        firstname=firstname,
        lastname=lastname,
        created_at=get_current_timestamp(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(USERNAME_EXISTS)
    db.refresh(user)

    access_token, refresh_token = issue_session(db, user.id)
    logger.info(f"Зарегистрирован пользователь: '{user.username}' (ID: {user.id})")
    return user, access_token, refresh_token


def login_user(db: Session, username: str, password: str) -> tuple[User, str, str]:
    user = authenticate_user(db, username, password)
    if user is None:
        logger.warning(f"Неудачная попытка входа: '{username}'")
        raise Unauthenticated("Invalid credentials")

    cleanup_expired_tokens(db)
    access_token, refresh_token = issue_session(db, user.id)
    logger.info(f"Успешный вход пользователя: '{user.username}' (ID: {user.id})")
    return user, access_token, refresh_token


def logout_user(db: Session, user_id: int) -> None:
    revoke_refresh_token(db, user_id)
    logger.info(f"Выход пользователя ID: {user_id}")


def refresh_session(db: Session, user_id: int, presented_token: str) -> tuple[str, str]:
    """Обмен refresh токена на новую пару с ротацией.

    Токен должен быть подписан REFRESH_SECRET, принадлежать user_id из access
    токена и совпадать с сохраненным.
    """
    try:
        payload = decode_refresh_token(presented_token)
        if payload["userId"] != user_id:
            raise RefreshTokenMismatch()
        consume_refresh_token(db, user_id, presented_token)
    except (InvalidTokenError, RefreshTokenError) as e:
        logger.warning(f"Отклонен refresh токен пользователя ID {user_id}: {type(e).__name__}")
        raise RefreshTokenError()

    access_token = create_access_token(user_id)
    new_refresh_token = create_refresh_token(user_id)
    expires_at = get_token_expiry(decode_refresh_token(new_refresh_token))

    if not rotate_refresh_token(db, user_id, presented_token, new_refresh_token, expires_at):
        logger.warning(f"Параллельная ротация refresh токена пользователя ID {user_id}")
        raise RefreshTokenError()

    logger.info(f"Обновлен токен для пользователя ID: {user_id}")
    return access_token, new_refresh_token


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(db: Session, user: User, changes: dict) -> User:
    for field in ("firstname", "lastname"):
        if field in changes:
            setattr(user, field, changes[field])
    user.updated_at = get_current_timestamp()
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Смена пароля; refresh token удаляется, все устройства должны войти заново"""
    if not verify_password(current_password, user.password_hash):
        raise Unauthenticated("Current password is incorrect")

    user.password_hash = get_password_hash(new_password)
    user.updated_at = get_current_timestamp()
    # revoke_refresh_token коммитит смену пароля вместе с удалением токена
    revoke_refresh_token(db, user.id)
    logger.info(f"Пароль изменен для пользователя ID: {user.id}")


def set_profile_picture(db: Session, user: User, key: str, content_type: str) -> User:
    """Сохранить ссылку на загруженный аватар (сама загрузка вне API)"""
    user.profile_picture_path = key
    user.profile_picture_type = content_type
    user.updated_at = get_current_timestamp()
    db.commit()
    db.refresh(user)
    return user
