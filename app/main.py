import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import init_db
from app.errors import register_exception_handlers
from app.api.v1 import auth, users, friends, activities, comments, likes
from app.services.auth import get_current_timestamp

# Настройка логирования
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="RythmRun API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключение роутеров
app.include_router(auth.router, prefix="/api/users", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(users.avatar_router, prefix="/api/avatar", tags=["avatar"])
app.include_router(friends.router, prefix="/api/friends", tags=["friends"])
app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
app.include_router(comments.router, prefix="/api/activities/{activity_id}/comments", tags=["comments"])
app.include_router(likes.router, prefix="/api/activities/{activity_id}/likes", tags=["likes"])


@app.get("/health")
def health_check():
    return {"status": "ok", "timestamp": get_current_timestamp()}
