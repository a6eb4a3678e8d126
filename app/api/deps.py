from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import Unauthenticated
from app.models.user import User
from app.services.auth import InvalidTokenError, decode_access_token
from app.services.users import get_user

# auto_error=False: отсутствие заголовка обрабатываем сами (401, а не 403)
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> int:
    """ID пользователя из access токена, без обращения к БД"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")

    try:
        payload = decode_access_token(credentials.credentials)
    except InvalidTokenError:
        raise Unauthenticated("Invalid token")
    return payload["userId"]


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Текущий пользователь из БД, для эндпоинтов профиля"""
    return get_user(db, user_id)
