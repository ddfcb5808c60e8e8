import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="formcraft-uploads-"))
os.environ["SMTP_HOST"] = ""

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from formcraft.main import app
from formcraft.database import Base, get_db, init_db, make_engine
from formcraft.models.form import Form, FormStatus
from formcraft.models.user import PlanType, User
from formcraft.services.auth import get_current_active_user
from formcraft.services.rate_limit import limiter

engine = make_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    init_db(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def owner(db):
    user = User(email="owner@example.com", username="owner", plan_type=PlanType.FREE)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_owner(db):
    user = User(email="other@example.com", username="other", plan_type=PlanType.PREMIUM)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_form(db, owner):
    def _make(fields=None, status=FormStatus.PUBLISHED, user=None, settings=None, **kwargs):
        form = Form(
            owner_id=(user or owner).id,
            title=kwargs.pop("title", "Test Form"),
            status=status,
            fields=fields or [],
            settings=settings or {},
            theme={},
            **kwargs
        )
        db.add(form)
        db.commit()
        db.refresh(form)
        return form
    return _make


@pytest.fixture
def anon_client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client, owner):
    app.dependency_overrides[get_current_active_user] = lambda: owner
    yield anon_client
