# /tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradebook.db.base import Base
from gradebook.db.database import enable_sqlite_foreign_keys, get_db
from gradebook.main import app
from gradebook.services import run_service
from gradebook.services.database_service import DatabaseService

# --- Fixture .RUN files ---
# Fall 2024 has two groups; COMSC110 is listed by both of them.
RUN_FILES = {
    "FALL2024.RUN": "Fall 2024\nCS.GRP\nMATH.GRP\n",
    "CS.GRP": "Computer Science\nCOMSC110.SEC\nCOMSC200.SEC\n",
    "MATH.GRP": "Mathematics\nMATH101.SEC\nCOMSC110.SEC\n",
    "COMSC110.SEC": (
        "COMSC110 4\n"
        '"Doe, Jane","1001","A+"\n'
        '"Smith, John","1002","B"\n'
        '"Lee, Ann","1003","F"\n'
    ),
    "COMSC200.SEC": (
        "COMSC200 3\n"
        '"Doe, Jane","1001","A"\n'
        '"Smith, John","1002","W"\n'
    ),
    "MATH101.SEC": (
        "MATH101 3\n"
        "\n"
        '"Doe, Jane","1001","B+"\n'
        '"Lee, Ann","1003","D"\n'
    ),
}


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test, with foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def db_service(session):
    return DatabaseService(db_session=session)


@pytest.fixture
def run_dir(tmp_path):
    """Writes the Fall 2024 run files into a temporary directory."""
    for name, contents in RUN_FILES.items():
        (tmp_path / name).write_text(contents, encoding="utf-8")
    return tmp_path


@pytest.fixture
def run_file(run_dir):
    return run_dir / "FALL2024.RUN"


@pytest.fixture
def imported_run(db_service, run_file):
    """Imports the Fall 2024 run and returns the import summary."""
    return run_service.import_run(db_service, str(run_file))


@pytest.fixture
def client(session):
    """
    A TestClient whose requests share the test's session. Not entered as a
    context manager, so the startup hook (create_all on the real engine)
    never runs.
    """
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
