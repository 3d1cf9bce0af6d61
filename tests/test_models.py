import pytest
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from parkpass.infrastructure.persistence.models.models import Base, Snapshot


@pytest.fixture(scope="function")
def db_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


def test_snapshot_model(db_session):
    snapshot = Snapshot(key="parkpass_database", payload='{"users": []}')
    db_session.add(snapshot)
    db_session.commit()
    db_session.refresh(snapshot)

    assert snapshot.key == "parkpass_database"
    assert snapshot.payload == '{"users": []}'
    assert isinstance(snapshot.updated_at, datetime)
    assert snapshot.updated_at.tzinfo == timezone.utc


def test_snapshot_updated_at_moves_on_update(db_session):
    snapshot = Snapshot(key="k", payload="a", updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    db_session.add(snapshot)
    db_session.commit()

    snapshot.payload = "b"
    db_session.commit()
    db_session.refresh(snapshot)

    assert snapshot.updated_at > datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_snapshot_size_bytes():
    assert Snapshot(key="k", payload="héllo").size_bytes == 6
    assert Snapshot(key="k").size_bytes == 0


def test_snapshot_to_dict():
    now = datetime.now(timezone.utc)
    snapshot = Snapshot(key="k", payload="{}", updated_at=now)
    assert snapshot.to_dict() == {"key": "k", "payload": "{}", "updated_at": now}
