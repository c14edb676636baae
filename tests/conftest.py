import pytest
from fastapi.testclient import TestClient

from presensi.config import settings
from presensi.database import Base, create_db_engine
from presensi.main import create_app
from presensi.services.record_store import SqlRecordStore
from sqlalchemy.orm import sessionmaker

from tests.fakes import FakeRecordStore, make_token


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'presensi-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine):
    return SqlRecordStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture
def client(engine, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_REVERSE_GEOCODING", False)
    app = create_app(engine=engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    token = make_token({"sub": "2b1e6a1c-0f3e-4a57-9a53-3c2b8f6f1d10"})
    return {"Authorization": f"Bearer {token}"}
