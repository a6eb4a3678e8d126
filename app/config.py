import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./rythmrun.db")

    # JWT: отдельные ключи для access и refresh токенов
    ACCESS_SECRET: str = os.getenv("ACCESS_SECRET") or os.getenv("JWT_SECRET", "change-me-access")
    REFRESH_SECRET: str = os.getenv("REFRESH_SECRET", "change-me-refresh")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # CORS
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # Timezone
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    # RELOAD=true только для локальной разработки
    RELOAD: bool = os.getenv("RELOAD", "false").lower() == "true"

    # Friends: разрешить повторную заявку после отклонения
    FRIEND_REREQUEST_AFTER_REJECT: bool = (
        os.getenv("FRIEND_REREQUEST_AFTER_REJECT", "true").lower() == "true"
    )

    # Activities pagination
    ACTIVITIES_DEFAULT_LIMIT: int = 10
    ACTIVITIES_MAX_LIMIT: int = 50


settings = Settings()
