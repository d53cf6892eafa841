import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from mentorhub.core.database import connect_to_mongo, close_mongo_connection
from mentorhub.core.logging_config import configure_logging
from mentorhub.core.email_service.email_instance import email_service
from mentorhub.modules.auth.router import auth_router
from mentorhub.modules.users.router import user_router
from mentorhub.modules.sessions.router import session_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    await connect_to_mongo()
    if email_service.client:
        logger.info("Email service initialized (SendGrid)")
    else:
        logger.info("Email service running in MOCK mode")
    yield
    # Shutdown
    await close_mongo_connection()


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title="MentorHub", lifespan=lifespan if use_lifespan else None)

    @app.get("/")
    async def root():
        return {"message": "MentorHub API"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(user_router, prefix="/api")
    app.include_router(session_router, prefix="/api")
    return app


app = create_app()
