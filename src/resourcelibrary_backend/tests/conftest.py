import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from resourcelibrary_backend.business_logic.courses import ensure_site_course
from resourcelibrary_backend.customfield import CourseHandler, CourseModuleHandler
from resourcelibrary_backend.database import get_db
from resourcelibrary_backend.model import Base, CourseMember, User
from resourcelibrary_backend.permissions.auth import build_principal
from resourcelibrary_backend.schemas.customfields import CategoryCreate, FieldCreate, FieldType
from resourcelibrary_backend.server import app
from resourcelibrary_backend.settings import settings


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    ensure_site_course(session)
    session.commit()
    yield session
    session.close()


@pytest.fixture
def resourcelibrary_fields(db: Session):
    """The same five fields (f1..f5) in the course and the course module area."""
    created = {}
    for handler in (CourseHandler(db), CourseModuleHandler(db)):
        category = handler.create_category(CategoryCreate(name="Resource library"))
        fields = [
            FieldCreate(categoryid=category.id, type=FieldType.TEXT, shortname="f1", name="Field 1"),
            FieldCreate(categoryid=category.id, type=FieldType.CHECKBOX, shortname="f2", name="Field 2"),
            FieldCreate(
                categoryid=category.id, type=FieldType.DATE, shortname="f3", name="Field 3",
                configdata={"startyear": 2000, "endyear": 3000, "includetime": 1},
            ),
            FieldCreate(
                categoryid=category.id, type=FieldType.SELECT, shortname="f4", name="Field 4",
                configdata={"options": "a\nb\nc"},
            ),
            FieldCreate(categoryid=category.id, type=FieldType.TEXTAREA, shortname="f5", name="Field 5"),
        ]
        created[handler.area.value] = {field.shortname: handler.create_field(field) for field in fields}
    db.commit()
    return created


@pytest.fixture
def admin_user(db: Session) -> User:
    user = User(username="admin", email="admin@example.com", is_admin=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def student_user(db: Session) -> User:
    user = User(username="student1", email="student1@example.com", is_admin=False)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin_principal(db: Session, admin_user: User):
    return build_principal(db, admin_user.username)


@pytest.fixture
def enrol(db: Session):
    def _enrol(user: User, course_id: int, role: str = "_student") -> CourseMember:
        member = CourseMember(user_id=user.id, course_id=course_id, course_role_id=role)
        db.add(member)
        db.commit()
        return member
    return _enrol


@pytest.fixture
def test_client(db: Session, admin_user: User):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app, headers={settings.AUTH_USER_HEADER: admin_user.username})
    yield client
    app.dependency_overrides.clear()
