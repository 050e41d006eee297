from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import Field, field_validator
from sqlalchemy import case, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.auth.dependencies import (
    ensure_self,
    get_current_email,
    require_admin,
    require_instructor,
)
from booking_api.auth.roles import normalize_email
from booking_api.core import config
from booking_api.core.errors import database_unavailable
from booking_api.database import get_db
from booking_api.models.course import CLASS_STATUSES, STATUS_APPROVED, STATUS_PENDING, Course
from booking_api.routes.schemas import ApiModel, InsertResult, UpdateResult

router = APIRouter(tags=['classes'])

CLASS_ID_TAKEN_MESSAGE = 'Class id is already taken.'


class ClassResponse(ApiModel):
    id: int
    name: str
    image: str | None = None
    instructor_name: str | None = None
    instructor_email: str | None = None
    price: float
    available_seats: int
    enrolled: int
    status: str
    feedback: str | None = None


class PopularClassResponse(ApiModel):
    id: int
    name: str
    image: str | None = None
    instructor_name: str | None = None
    enrolled: int


class ClassFieldsRequest(ApiModel):
    name: str
    image: str | None = None
    instructor_name: str | None = None
    instructor_email: str | None = None
    price: float = Field(ge=0)
    available_seats: int = Field(ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Class name is required.')
        return normalized

    @field_validator('instructor_email')
    @classmethod
    def validate_instructor_email(cls, value: str | None) -> str | None:
        return normalize_email(value) or None


class FeedbackRequest(ApiModel):
    message: str


class ClassStatusRequest(ApiModel):
    status: str | None = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized not in CLASS_STATUSES:
            raise ValueError(f'Status must be one of: {", ".join(CLASS_STATUSES)}.')
        return normalized


def apply_class_fields(course: Course, data: ClassFieldsRequest, caller_email: str) -> None:
    course.name = data.name
    course.image = data.image
    course.instructor_name = data.instructor_name
    course.instructor_email = data.instructor_email or caller_email
    course.price = data.price
    course.available_seats = data.available_seats


def class_fields_snapshot(course: Course) -> tuple:
    return (
        course.name,
        course.image,
        course.instructor_name,
        course.instructor_email,
        course.price,
        course.available_seats,
    )


def pending_first_order():
    return case((Course.status == STATUS_PENDING, 0), else_=1)


def sync_class_id_sequence(db: Session) -> None:
    if db.get_bind().dialect.name != 'postgresql':
        return

    db.execute(text(
        "SELECT setval(pg_get_serial_sequence('classes', 'id'), "
        "(SELECT COALESCE(MAX(id), 1) FROM classes))"
    ))


@router.get('/popularClasses', response_model=list[PopularClassResponse])
def list_popular_classes(db: Session = Depends(get_db)):
    return db.query(Course).filter(
        Course.enrolled > config.POPULAR_CLASS_MIN_ENROLLED,
        Course.available_seats > 0,
    ).order_by(Course.enrolled.desc(), Course.id.asc()).limit(config.POPULAR_LIMIT).all()


@router.get('/allClasses', response_model=list[ClassResponse])
def list_approved_classes(db: Session = Depends(get_db)):
    return db.query(Course).filter(Course.status == STATUS_APPROVED).order_by(Course.id.asc()).all()


@router.patch('/allClasses/{class_id}', response_model=UpdateResult, dependencies=[Depends(get_current_email)])
def set_class_feedback(class_id: int, data: FeedbackRequest, db: Session = Depends(get_db)):
    try:
        course = db.query(Course).filter(Course.id == class_id).first()
        if course is None:
            return UpdateResult()

        modified = course.feedback != data.message
        course.feedback = data.message
        db.commit()
        return UpdateResult(matched_count=1, modified_count=int(modified))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.get('/myClasses', response_model=list[ClassResponse])
def list_my_classes(
    email: str | None = Query(default=None),
    caller_email: str = Depends(require_instructor),
    db: Session = Depends(get_db),
):
    ensure_self(email, caller_email)

    return db.query(Course).filter(
        Course.instructor_email == caller_email,
    ).order_by(Course.id.asc()).all()


@router.post('/allClasses', response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def create_class(
    data: ClassFieldsRequest,
    caller_email: str = Depends(require_instructor),
    db: Session = Depends(get_db),
):
    try:
        course = Course(status=STATUS_PENDING, enrolled=0)
        apply_class_fields(course, data, caller_email)

        db.add(course)
        db.commit()
        db.refresh(course)

        return InsertResult(inserted_id=course.id)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CLASS_ID_TAKEN_MESSAGE) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.put('/myClasses/{class_id}', response_model=UpdateResult)
def replace_class(
    class_id: int,
    data: ClassFieldsRequest,
    caller_email: str = Depends(require_instructor),
    db: Session = Depends(get_db),
):
    try:
        course = db.query(Course).filter(Course.id == class_id).first()
        if course is None:
            course = Course(id=class_id, status=STATUS_PENDING, enrolled=0)
            apply_class_fields(course, data, caller_email)
            db.add(course)
            db.flush()
            sync_class_id_sequence(db)
            db.commit()
            return UpdateResult(upserted_id=class_id)

        ensure_self(course.instructor_email, caller_email)

        before = class_fields_snapshot(course)
        apply_class_fields(course, data, caller_email)
        modified = class_fields_snapshot(course) != before
        db.commit()
        return UpdateResult(matched_count=1, modified_count=int(modified))
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CLASS_ID_TAKEN_MESSAGE) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.get('/manageAllClasses', response_model=list[ClassResponse], dependencies=[Depends(require_admin)])
def list_classes_for_review(
    status_filter: str | None = Query(default=None, alias='status'),
    email: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    query = db.query(Course)
    if status_filter:
        query = query.filter(Course.status == status_filter.strip().lower())
    if email:
        query = query.filter(Course.instructor_email == normalize_email(email))

    return query.order_by(pending_first_order(), Course.id.asc()).all()


@router.patch('/manageAllClasses/{class_id}', response_model=UpdateResult, dependencies=[Depends(require_admin)])
def set_class_status(class_id: int, data: ClassStatusRequest, db: Session = Depends(get_db)):
    try:
        course = db.query(Course).filter(Course.id == class_id).first()
        if course is None:
            return UpdateResult()

        new_status = data.status or STATUS_PENDING
        modified = course.status != new_status
        course.status = new_status
        db.commit()
        return UpdateResult(matched_count=1, modified_count=int(modified))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
