import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend import models
from backend.database import Base
from backend.services import projects, roles
from tests.factories import make_user

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def db_session() -> Session:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    roles.ensure_seeded(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def owner(db_session: Session) -> models.User:
    return make_user(db_session, "Owner")


@pytest.fixture
def project(db_session: Session, owner: models.User) -> models.Project:
    return projects.create_project(db_session, owner.id, "Apollo", "Moon landing plan")
