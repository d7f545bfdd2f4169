import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.constants import RoleEnum, MockTestTypeEnum, MockTestStatusEnum
from app.core.database import Base
from app.core.security import create_access_token
from app.crud.user import user as crud_user
from app.crud.mock_test import mock_test as crud_mock_test
from app.middleware.rate_limit import LIMITERS
from app.schemas.user import UserContext, User as UserSchema
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        # Services commit, so each test leaves rows behind unless cleared
        with database_engine.begin() as connection:
            for table in reversed(Base.metadata.sorted_tables):
                connection.execute(table.delete())

@pytest.fixture(autouse=True)
def _reset_rate_limiters():
    for limiter in LIMITERS.values():
        limiter.reset()
    yield
    for limiter in LIMITERS.values():
        limiter.reset()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_factory(db_session):
    def _user_factory(name="Test Candidate", email=None, role=RoleEnum.USER):
        user_data = {
            "name": name,
            "email": email or f"candidate-{uuid.uuid4().hex[:8]}@test.com",
            "role": role,
        }
        return crud_user.create(db_session, obj_in=user_data)
    return _user_factory

@pytest.fixture
def test_factory(db_session):
    def _test_factory(title="Academic Mock 1", type=MockTestTypeEnum.FULL_MOCK, skills=None):
        test_data = {
            "title": title,
            "type": type,
            "skills": skills or ["listening", "reading", "writing", "speaking"],
            "duration": 165,
            "status": MockTestStatusEnum.PUBLISHED,
        }
        return crud_mock_test.create(db_session, obj_in=test_data)
    return _test_factory

@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

@pytest.fixture
def context_for():
    """UserContext for calling services directly, as the auth dependency would build it."""
    def _context_for(user):
        return UserContext(user=UserSchema.model_validate(user), role=user.role)
    return _context_for
