import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("BILLING_ENABLED", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from gymmonitor.config import get_settings
from gymmonitor.db.session import Base
from gymmonitor.db import models  # noqa: F401


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def api_client():
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from sqlalchemy.pool import StaticPool

    from gymmonitor.api.errors import register_error_handlers
    from gymmonitor.api.routes import auth, classes, member, misc, staff
    from gymmonitor.db.session import get_db

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    test_app = FastAPI()
    register_error_handlers(test_app)
    for module in (auth, classes, member, staff, misc):
        test_app.include_router(module.router, prefix="/api")
    test_app.dependency_overrides[get_db] = override_get_db

    with TestClient(test_app) as client:
        yield client, TestingSessionLocal

    test_app.dependency_overrides.clear()
    engine.dispose()
