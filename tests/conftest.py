import os

# До импорта приложения: тесты не должны трогать локальную БД
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ACCESS_SECRET"] = "test-access-secret"
os.environ["REFRESH_SECRET"] = "test-refresh-secret"

from datetime import datetime, timedelta

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, build_engine, get_db, init_db
from app.main import app
from app.models import Activity, Location, User
from app.services.auth import get_current_timestamp, to_utc_iso

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def faker():
    return Faker()


@pytest.fixture
def make_user(db_session, faker):
    """Пользователь напрямую в БД, без хеширования пароля"""

    def _make_user(username=None):
        user = User(
            username=username or faker.unique.email(),
            password_hash="not-a-real-hash",
            firstname=faker.first_name(),
            lastname=faker.last_name(),
            created_at=get_current_timestamp(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_activity(db_session):
    def _make_activity(user, is_public=False, start_time="2024-03-24T08:00:00", activity_type="RUN"):
        start = datetime.fromisoformat(start_time)
        activity = Activity(
            user_id=user.id,
            type=activity_type,
            start_time=to_utc_iso(start_time),
            end_time=to_utc_iso((start + timedelta(minutes=30)).isoformat()),
            distance=5000,
            duration=1800,
            avg_speed=10,
            max_speed=12,
            is_public=is_public,
            created_at=get_current_timestamp(),
            locations=[Location(latitude=48.85, longitude=2.35, timestamp=to_utc_iso(start_time))],
        )
        db_session.add(activity)
        db_session.commit()
        db_session.refresh(activity)
        return activity

    return _make_activity


@pytest.fixture
def register(client, faker):
    """Регистрация через API; возвращает данные пользователя и заголовки авторизации"""

    def _register(username=None, password=DEFAULT_PASSWORD):
        username = username or faker.unique.email()
        response = client.post("/api/users/register", json={
            "username": username,
            "password": password,
            "firstname": faker.first_name(),
            "lastname": faker.last_name(),
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "username": username,
            "password": password,
            "access_token": body["accessToken"],
            "refresh_token": body["refreshToken"],
            "headers": {"Authorization": f"Bearer {body['accessToken']}"},
        }

    return _register


@pytest.fixture
def activity_payload():
    def _payload(is_public=False, start_time="2024-03-24T08:00:00Z", **overrides):
        payload = {
            "type": "RUN",
            "startTime": start_time,
            "endTime": "2024-03-24T08:30:00Z",
            "distance": 5000,
            "duration": 1800,
            "avgSpeed": 10,
            "maxSpeed": 12,
            "calories": 400,
            "description": "Morning run",
            "isPublic": is_public,
            "locations": [
                {"latitude": 48.8566, "longitude": 2.3522, "timestamp": "2024-03-24T08:00:00Z"},
                {"latitude": 48.8576, "longitude": 2.3532, "timestamp": "2024-03-24T08:15:00Z"},
            ],
        }
        payload.update(overrides)
        return payload

    return _payload
