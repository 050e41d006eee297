import logging

from fastapi import APIRouter
from pydantic import ConfigDict, field_validator

from booking_api.auth import jwt_handler
from booking_api.auth.roles import normalize_email
from booking_api.routes.schemas import ApiModel

router = APIRouter(tags=['auth'])
logger = logging.getLogger(__name__)


class TokenRequest(ApiModel):
    model_config = ConfigDict(extra='allow')

    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class TokenResponse(ApiModel):
    token: str


@router.post('/jwt', response_model=TokenResponse)
def issue_token(data: TokenRequest):
    claims = data.model_dump(exclude_none=True)
    token = jwt_handler.create_access_token(claims)
    logger.info('Issued access token for %s', data.email)
    return TokenResponse(token=token)
