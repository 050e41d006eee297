from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import AliasChoices, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from booking_api.auth.dependencies import ensure_self, get_current_email
from booking_api.auth.roles import normalize_email
from booking_api.database import get_db
from booking_api.models.payment import Payment
from booking_api.payments import enrollment, stripe_client
from booking_api.routes.schemas import ApiModel, DeleteResult, InsertResult, UpdateResult

router = APIRouter(tags=['payments'])


class PaymentIntentRequest(ApiModel):
    price: float = Field(gt=0, validation_alias=AliasChoices('price', 'totalPrice'))


class PaymentIntentResponse(ApiModel):
    client_secret: str


class CreatePaymentRequest(ApiModel):
    email: str
    price: float = Field(ge=0)
    transaction_id: str | None = None
    date: datetime | None = None
    class_id: int | None = None
    class_ids: list[int] = Field(default_factory=list)
    selection_id: int | None = None
    selection_ids: list[int] = Field(default_factory=list)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized

    @model_validator(mode='after')
    def merge_single_item_checkout(self) -> 'CreatePaymentRequest':
        if self.class_id is not None and self.class_id not in self.class_ids:
            self.class_ids.append(self.class_id)
        if self.selection_id is not None and self.selection_id not in self.selection_ids:
            self.selection_ids.append(self.selection_id)
        return self


class PaymentFinalizationResponse(ApiModel):
    insert_result: InsertResult
    delete_result: DeleteResult
    patch_result: UpdateResult


class PaymentResponse(ApiModel):
    id: int
    email: str
    price: float
    transaction_id: str | None = None
    date: datetime
    class_ids: list[int]
    selection_ids: list[int]


@router.post('/createPaymentIntent', response_model=PaymentIntentResponse)
def create_payment_intent(data: PaymentIntentRequest, caller_email: str = Depends(get_current_email)):
    amount = stripe_client.to_minor_units(data.price)
    intent = stripe_client.create_payment_intent(amount, metadata={'email': caller_email})

    return PaymentIntentResponse(client_secret=intent.client_secret)


@router.post('/payments', response_model=PaymentFinalizationResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    data: CreatePaymentRequest,
    caller_email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
):
    ensure_self(data.email, caller_email)

    result = enrollment.finalize_enrollment(
        db,
        email=caller_email,
        price=data.price,
        class_ids=data.class_ids,
        selection_ids=data.selection_ids,
        transaction_id=data.transaction_id,
        paid_at=data.date,
    )

    return PaymentFinalizationResponse(
        insert_result=InsertResult(inserted_id=result.payment.id),
        delete_result=DeleteResult(deleted_count=result.deleted_count),
        patch_result=UpdateResult(matched_count=result.matched_count, modified_count=result.modified_count),
    )


@router.get('/payments', response_model=list[PaymentResponse])
def list_my_payments(
    email: str | None = Query(default=None),
    caller_email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
):
    ensure_self(email, caller_email)

    return db.query(Payment).filter(Payment.email == caller_email).order_by(
        Payment.date.desc(),
        Payment.id.desc(),
    ).all()
