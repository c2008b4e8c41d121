"""
Главный файл FastAPI приложения.
"""
import asyncio
import logging
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewnotify.core.config import settings
from crewnotify.core.database import get_db
from crewnotify.core.exceptions import AppException
from crewnotify.api import api_router
from crewnotify.workers.scheduler import run_scheduler

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_TITLE,
    description="API уведомлений и напоминаний для экипажа",
    version="1.0.0",
)


@app.exception_handler(AppException)
async def app_exception_handler(request, exc: AppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
    )


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request, exc: SQLAlchemyError):
    logger.error(f"Store error: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Store is unavailable", "error_code": "STORE_FAILURE"},
    )


# CORS middleware: разрешённые домены из переменной окружения
origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint with database verification."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": str(e)},
        )

# Подключаем API роутер
app.include_router(api_router)

_background_tasks: set[asyncio.Task] = set()


@app.on_event("startup")
async def startup_event():
    """Действия при старте приложения."""
    logger.info("Application startup")
    if settings.SCHEDULER_ENABLED:
        task = asyncio.create_task(run_scheduler())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)


@app.on_event("shutdown")
async def shutdown_event():
    """Действия при остановке приложения."""
    for task in list(_background_tasks):
        task.cancel()
    logger.info("Application shutdown")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
