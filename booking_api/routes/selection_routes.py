from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.auth.dependencies import ensure_self, get_current_email
from booking_api.auth.roles import normalize_email
from booking_api.core.errors import database_unavailable
from booking_api.database import get_db
from booking_api.models.course import Course
from booking_api.models.selection import Selection
from booking_api.routes.schemas import ApiModel, DeleteResult, InsertResult

router = APIRouter(prefix='/selectedClasses', tags=['selections'])


class SelectionResponse(ApiModel):
    id: int
    email: str
    class_id: int
    name: str | None = None
    image: str | None = None
    instructor_name: str | None = None
    price: float | None = None


class CreateSelectionRequest(ApiModel):
    class_id: int
    email: str | None = None
    name: str | None = None
    image: str | None = None
    instructor_name: str | None = None
    price: float | None = None


@router.get('', response_model=list[SelectionResponse])
def list_my_selections(
    email: str | None = Query(default=None),
    caller_email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
):
    if not email:
        return []

    ensure_self(email, caller_email)

    return db.query(Selection).filter(Selection.email == caller_email).order_by(Selection.id.asc()).all()


@router.post('', response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def create_selection(
    data: CreateSelectionRequest,
    caller_email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
):
    try:
        if db.get(Course, data.class_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Class not found.',
            )

        selection = Selection(
            email=normalize_email(data.email) or caller_email,
            class_id=data.class_id,
            name=data.name,
            image=data.image,
            instructor_name=data.instructor_name,
            price=data.price,
        )
        db.add(selection)
        db.commit()
        db.refresh(selection)

        return InsertResult(inserted_id=selection.id)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Class not found.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc


@router.delete('/{selection_id}', response_model=DeleteResult, dependencies=[Depends(get_current_email)])
def delete_selection(selection_id: int, db: Session = Depends(get_db)):
    try:
        deleted_count = db.query(Selection).filter(Selection.id == selection_id).delete(synchronize_session=False)
        db.commit()

        return DeleteResult(deleted_count=deleted_count)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc
