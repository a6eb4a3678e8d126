#!/usr/bin/env python3
"""
Запуск RythmRun API через uvicorn
Адрес, порт, уровень логов и reload берутся из app.config
"""
import uvicorn
from app.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
