import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from booking_api.core import config
from booking_api.core.errors import register_exception_handlers
from booking_api.database import Base, engine
from booking_api.models import course, instructor, payment, selection, user  # noqa: F401
from booking_api.routes import (
    auth_routes,
    class_routes,
    instructor_routes,
    payment_routes,
    selection_routes,
    user_routes,
)

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = 'class booking server is running'


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
    logger.info('Class booking API started (env=%s)', config.APP_ENV)
    try:
        yield
    finally:
        engine.dispose()
        logger.info('Database connections released')


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app = FastAPI(title='Class Booking API', lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    @app.get('/', response_class=PlainTextResponse)
    def root():
        return LIVENESS_MESSAGE

    app.include_router(auth_routes.router)
    app.include_router(class_routes.router)
    app.include_router(instructor_routes.router)
    app.include_router(user_routes.router)
    app.include_router(selection_routes.router)
    app.include_router(payment_routes.router)
    return app


app = create_app()
