import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from booking_api.auth import jwt_handler  # noqa: E402
from booking_api.database import Base, get_db  # noqa: E402
from booking_api.main import app  # noqa: E402
from booking_api.models.course import STATUS_APPROVED, Course  # noqa: E402
from booking_api.models.selection import Selection  # noqa: E402
from booking_api.models.user import User  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: str | None = 'none') -> User:
        user = User(email=email, role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_class(db):
    def _make_class(
        name: str = 'Street Photography Basics',
        instructor_email: str = 'teacher@example.com',
        available_seats: int = 30,
        enrolled: int = 0,
        price: float = 50.0,
        status: str = STATUS_APPROVED,
    ) -> Course:
        course = Course(
            name=name,
            image='https://img.example.com/class.png',
            instructor_name='Teacher',
            instructor_email=instructor_email,
            price=price,
            available_seats=available_seats,
            enrolled=enrolled,
            status=status,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make_class


@pytest.fixture
def make_selection(db):
    def _make_selection(email: str, course: Course) -> Selection:
        selection = Selection(email=email, class_id=course.id, name=course.name, price=course.price)
        db.add(selection)
        db.commit()
        db.refresh(selection)
        return selection

    return _make_selection


@pytest.fixture
def auth_headers():
    def _auth_headers(email: str, **extra_claims) -> dict:
        token = jwt_handler.create_access_token({'email': email, **extra_claims})
        return {'Authorization': f'Bearer {token}'}

    return _auth_headers
