# main.py
import logging
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
# This avoids confusing situations where scripts see .env but uvicorn doesn't.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from babytracker.config import settings
from babytracker.config import build_sqlalchemy_db_url
from babytracker.database import Base, engine
from babytracker.errors import register_exception_handlers
from babytracker.models import Action, BabyProfile, User, UserBabyRole  # noqa: F401  # register tables
from babytracker.api.routes.emojis import router as emojis_router
from babytracker.api.routes.health import router as health_router
from babytracker.routers import actions, auth, baby_profiles, users


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    # Public endpoints
    application.include_router(health_router)
    application.include_router(emojis_router)

    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(users.router, prefix="/users", tags=["users"])
    application.include_router(baby_profiles.router)
    application.include_router(actions.router)

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
