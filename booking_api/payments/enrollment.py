"""Turns a paid checkout into enrollments.

Recording the payment, retiring the cart selections and reserving one seat per
purchased class happen in a single database transaction. Seats are reserved
with a conditional ``UPDATE ... WHERE available_seats > 0`` so concurrent
checkouts for the last seat cannot drive the counter negative; whichever
transaction loses gets a 409 and nothing it did is kept.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.core.errors import database_unavailable
from booking_api.models.course import Course
from booking_api.models.payment import Payment
from booking_api.models.selection import Selection

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentResult:
    payment: Payment
    deleted_count: int
    matched_count: int
    modified_count: int


def unique_ids(ids: list[int]) -> list[int]:
    return list(dict.fromkeys(ids))


def reserve_seat(db: Session, class_id: int) -> int:
    return db.query(Course).filter(
        Course.id == class_id,
        Course.available_seats > 0,
    ).update(
        {
            Course.available_seats: Course.available_seats - 1,
            Course.enrolled: Course.enrolled + 1,
        },
        synchronize_session=False,
    )


def retire_selections(db: Session, email: str, selection_ids: list[int], class_ids: list[int]) -> int:
    selections = db.query(Selection).filter(
        Selection.id.in_(selection_ids),
        Selection.email == email,
    ).all()

    if len(selections) != len(selection_ids):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Selection not found.',
        )

    if sorted(selection.class_id for selection in selections) != sorted(class_ids):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Selections do not match the purchased classes.',
        )

    for selection in selections:
        db.delete(selection)
    db.flush()

    return len(selections)


def finalize_enrollment(
    db: Session,
    *,
    email: str,
    price: float,
    class_ids: list[int],
    selection_ids: list[int],
    transaction_id: str | None = None,
    paid_at: datetime | None = None,
) -> EnrollmentResult:
    class_ids = unique_ids(class_ids)
    selection_ids = unique_ids(selection_ids)

    if not class_ids or not selection_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='A payment must reference at least one class and one selection.',
        )

    try:
        payment = Payment(
            email=email,
            price=price,
            transaction_id=transaction_id,
            date=paid_at or datetime.now(timezone.utc),
            class_ids=class_ids,
            selection_ids=selection_ids,
        )
        db.add(payment)
        db.flush()

        deleted_count = retire_selections(db, email, selection_ids, class_ids)

        modified_count = 0
        for class_id in class_ids:
            updated = reserve_seat(db, class_id)
            if not updated:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f'No seats available for class {class_id}.',
                )
            modified_count += updated

        db.commit()
        db.refresh(payment)
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable(exc) from exc

    logger.info(
        'Finalized payment %s for %s classes=%s transaction=%s',
        payment.id,
        email,
        class_ids,
        transaction_id,
    )
    return EnrollmentResult(
        payment=payment,
        deleted_count=deleted_count,
        matched_count=len(class_ids),
        modified_count=modified_count,
    )
