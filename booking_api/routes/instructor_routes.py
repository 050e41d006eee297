from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from booking_api.core import config
from booking_api.database import get_db
from booking_api.models.instructor import Instructor
from booking_api.routes.schemas import ApiModel

router = APIRouter(tags=['instructors'])


class InstructorResponse(ApiModel):
    id: int
    name: str
    email: str | None = None
    image: str | None = None
    students: int


class PopularInstructorResponse(ApiModel):
    id: int
    name: str
    image: str | None = None
    students: int


@router.get('/popularInstructors', response_model=list[PopularInstructorResponse])
def list_popular_instructors(db: Session = Depends(get_db)):
    return db.query(Instructor).filter(
        Instructor.students > config.POPULAR_INSTRUCTOR_MIN_STUDENTS,
    ).order_by(Instructor.students.desc(), Instructor.id.asc()).limit(config.POPULAR_LIMIT).all()


@router.get('/allInstructors', response_model=list[InstructorResponse])
def list_instructors(db: Session = Depends(get_db)):
    return db.query(Instructor).order_by(Instructor.id.asc()).all()
