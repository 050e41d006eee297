import logging

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.auth.dependencies import require_admin, require_instructor
from booking_api.auth.roles import Role, normalize_email, resolve_role
from booking_api.core.errors import database_unavailable
from booking_api.database import get_db
from booking_api.models.user import User
from booking_api.routes.schemas import ApiModel, MessageResult, UpdateResult

router = APIRouter(prefix='/users', tags=['users'])
logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = 'user already exists'


class UserResponse(ApiModel):
    id: int
    email: str
    name: str | None = None
    image: str | None = None
    role: Role

    @field_validator('role', mode='before')
    @classmethod
    def default_role(cls, value) -> Role:
        return Role.from_value(value)


class RegisterUserRequest(ApiModel):
    email: str
    name: str | None = None
    image: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class RoleUpdateRequest(ApiModel):
    role: Role


class AdminCheckResponse(ApiModel):
    admin: bool


class InstructorCheckResponse(ApiModel):
    instructor: bool


@router.get('', response_model=list[UserResponse], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id.asc()).all()


@router.post('', response_model=MessageResult)
def register_user(data: RegisterUserRequest, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == data.email).first()
    if existing is not None:
        return MessageResult(message=USER_EXISTS_MESSAGE)

    try:
        user = User(email=data.email, name=data.name, image=data.image, role=Role.NONE.value)
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # a concurrent sign-in inserted the same email first
        db.rollback()
        return MessageResult(message=USER_EXISTS_MESSAGE)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc

    logger.info('Registered user %s', user.email)
    return MessageResult(inserted_id=user.id)


@router.get('/admin/{email}', response_model=AdminCheckResponse, dependencies=[Depends(require_admin)])
def check_admin(email: str, db: Session = Depends(get_db)):
    return AdminCheckResponse(admin=resolve_role(db, email) == Role.ADMIN)


@router.get('/instructor/{email}', response_model=InstructorCheckResponse, dependencies=[Depends(require_instructor)])
def check_instructor(email: str, db: Session = Depends(get_db)):
    return InstructorCheckResponse(instructor=resolve_role(db, email) == Role.INSTRUCTOR)


@router.patch('/admin/{user_id}', response_model=UpdateResult)
def update_user_role(
    user_id: int,
    data: RoleUpdateRequest,
    caller_email: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            return UpdateResult()

        modified = Role.from_value(user.role) != data.role
        user.role = data.role.value
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc

    logger.info('%s set role of user %s to %s', caller_email, user_id, data.role.value)
    return UpdateResult(matched_count=1, modified_count=int(modified))
