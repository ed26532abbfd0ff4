import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.department import Department
from app.services import content_service

TEST_DB_URL = "sqlite:///./test_dept_roster.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_departments(db):
    departments = {
        "ems": Department(name="Emergency Medical Services", slug="ems", color="#dc2626"),
        "fire": Department(name="Fire Department", slug="fire", color="#ea580c"),
    }
    for d in departments.values():
        db.add(d)
    db.commit()
    for d in departments.values():
        db.refresh(d)
    return departments


@pytest.fixture
def seed_users(db, seed_departments):
    users = {
        "super": User(email="super@usrp.test", username="Super", department="ems", role="super_admin", rank="Chief"),
        "admin": User(email="admin@usrp.test", username="EmsAdmin", department="ems", role="admin", rank="Captain"),
        "editor": User(email="editor@usrp.test", username="EmsEditor", department="ems", role="editor", rank="Paramedic"),
        "viewer": User(email="viewer@usrp.test", username="EmsViewer", department="ems", role="viewer", rank="EMT"),
        "fire_admin": User(email="fire@usrp.test", username="FireAdmin", department="fire", role="admin", rank="Captain"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def ems_sop(db, seed_users, seed_departments):
    return content_service.create(
        db,
        {
            "department_id": seed_departments["ems"].department_id,
            "title": "Cardiac Arrest Protocol",
            "slug": "cardiac-arrest",
            "body": "Start compressions.",
            "type": "sop",
            "status": "draft",
            "tags": ["cpr", "cardiac"],
        },
        seed_users["editor"].user_id,
    )


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
