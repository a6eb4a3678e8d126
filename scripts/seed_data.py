#!/usr/bin/env python3
"""
Скрипт для заполнения БД демонстрационными данными
Использование:
    python3 scripts/seed_data.py
    python3 scripts/seed_data.py --password secret123 --reset
"""
import sys
import os
import argparse
from datetime import datetime, timedelta

# Добавляем корневую директорию в путь
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from app.database import SessionLocal, init_db
from app.models import User, Activity, Location, Comment, Like, Friend, RefreshToken
from app.models.friend import ACCEPTED
from app.services.auth import get_password_hash, get_current_timestamp, format_utc

DEMO_USERS = [
    ("john.runner@example.com", "John", "Doe"),
    ("sarah.fitness@example.com", "Sarah", "Smith"),
]


def reset_data(db: Session) -> None:
    """Удалить все данные (в порядке зависимостей)"""
    for model in (Like, Comment, Location, Activity, RefreshToken, Friend, User):
        db.query(model).delete()
    db.commit()


def build_route(start: datetime, points: int = 5) -> list[Location]:
    return [
        Location(
            latitude=48.8566 + i * 0.001,
            longitude=2.3522 + i * 0.001,
            altitude=35.0,
            timestamp=format_utc(start + timedelta(minutes=i * 6)),
            accuracy=5.0,
            speed=2.8,
        )
        for i in range(points)
    ]


def seed(password: str, reset: bool) -> bool:
    """Создать демо-пользователей, активности, комментарий, лайк и дружбу"""
    db: Session = SessionLocal()

    try:
        if reset:
            reset_data(db)

        timestamp = get_current_timestamp()
        password_hash = get_password_hash(password)
        users = []
        for username, firstname, lastname in DEMO_USERS:
            if db.query(User).filter(User.username == username).first():
                print(f"Ошибка: Пользователь '{username}' уже существует (используйте --reset)")
                return False
            users.append(User(
                username=username,
                password_hash=password_hash,
                firstname=firstname,
                lastname=lastname,
                created_at=timestamp,
            ))
        db.add_all(users)
        db.flush()

        john, sarah = users
        start = datetime(2024, 3, 24, 8, 0)
        morning_run = Activity(
            user_id=john.id,
            type="RUN",
            start_time=format_utc(start),
            end_time=format_utc(start + timedelta(minutes=30)),
            distance=5000,
            duration=1800,
            avg_speed=10,
            max_speed=12,
            calories=400,
            description="Morning run in the park",
            is_public=True,
            created_at=timestamp,
            locations=build_route(start),
        )
        evening_ride = Activity(
            user_id=sarah.id,
            type="BIKE",
            start_time=format_utc(start + timedelta(hours=10)),
            end_time=format_utc(start + timedelta(hours=11)),
            distance=20000,
            duration=3600,
            avg_speed=20,
            max_speed=30,
            is_public=False,
            created_at=timestamp,
            locations=build_route(start + timedelta(hours=10)),
        )
        db.add_all([morning_run, evening_ride])
        db.flush()

        db.add(Comment(activity_id=morning_run.id, user_id=sarah.id, content="Great run!", created_at=timestamp))
        db.add(Like(activity_id=morning_run.id, user_id=sarah.id, created_at=timestamp))
        db.add(Friend(requester_id=john.id, target_id=sarah.id, status=ACCEPTED, created_at=timestamp, updated_at=timestamp))
        db.commit()

        print("✓ Демо-данные созданы:")
        for user in users:
            print(f"  {user.username} (ID: {user.id})")
        return True

    except Exception as e:
        db.rollback()
        print(f"Ошибка при заполнении БД: {e}")
        return False
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Заполнить БД демонстрационными данными")
    parser.add_argument("--password", help="Пароль демо-пользователей", default="password123")
    parser.add_argument("--reset", action="store_true", help="Удалить существующие данные")

    args = parser.parse_args()

    init_db()
    if not seed(args.password, args.reset):
        sys.exit(1)


if __name__ == "__main__":
    main()
