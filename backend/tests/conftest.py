"""
Тестовая инфраструктура: фикстуры для SQLite in-memory и FastAPI TestClient.
"""
import os

# Должно быть ДО импорта crewnotify: настройки читаются при импорте
os.environ["API_KEY"] = "test-api-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TIMEZONE"] = "UTC"
os.environ["FANOUT_MAX_WORKERS"] = "1"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["USER_DIRECTORY_URL"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from crewnotify.core.database import Base, get_db, get_session_factory
from crewnotify.core.utils import utcnow
from crewnotify.main import app as fastapi_app
from crewnotify.models.notice import Notice
from crewnotify.services.user_directory import StaticUserDirectory, get_user_directory

# Импортируем все модели чтобы Base.metadata знал о них
import crewnotify.models  # noqa: F401

ACTIVE_USERS = ["crew-1", "crew-2", "crew-3"]

# SQLite in-memory с StaticPool: одна БД для всех connections.
# Соединение общее: перед вызовом fan-out данные теста нужно закоммитить.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Создаёт все таблицы перед каждым тестом и удаляет после."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    """Фикстура тестовой сессии БД."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory() -> sessionmaker:
    """Фабрика сессий на той же тестовой БД (для fan-out)."""
    return TestingSessionLocal


@pytest.fixture
def file_session_factory(tmp_path) -> sessionmaker:
    """Файловая SQLite: для настоящей параллельной записи из нескольких потоков."""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'fanout.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=file_engine)
    yield sessionmaker(bind=file_engine)
    file_engine.dispose()


def _override_dependencies(db_session: Session) -> None:
    def override_get_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    fastapi_app.dependency_overrides[get_user_directory] = lambda: StaticUserDirectory(ACTIVE_USERS)


@pytest.fixture
def client_no_auth(db_session: Session) -> TestClient:
    """FastAPI TestClient БЕЗ API-ключа (для тестов безопасности)."""
    _override_dependencies(db_session)
    with TestClient(fastapi_app, raise_server_exceptions=False) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session) -> TestClient:
    """FastAPI TestClient с подменённой БД, API-ключом и пользователем crew-1."""
    _override_dependencies(db_session)
    with TestClient(
        fastapi_app,
        raise_server_exceptions=False,
        headers={"X-API-Key": "test-api-key", "X-User-Id": "crew-1"},
    ) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def service_client(db_session: Session) -> TestClient:
    """TestClient для вызовов от других модулей бэкенда: только API-ключ, без пользователя."""
    _override_dependencies(db_session)
    with TestClient(
        fastapi_app,
        raise_server_exceptions=False,
        headers={"X-API-Key": "test-api-key"},
    ) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_notice(db_session: Session):
    """Создаёт уведомление напрямую в БД и коммитит его."""
    def _make(user_id: str = "crew-1", **fields) -> Notice:
        values = {
            "category": "general",
            "title": "Test notice",
            "message": "Test message",
            "priority": "medium",
            "created_at": utcnow(),
        }
        values.update(fields)
        notice = Notice(user_id=user_id, **values)
        db_session.add(notice)
        db_session.commit()
        db_session.refresh(notice)
        return notice

    return _make
