import logging
import os
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from .api import admin, auth, clubs, events
from .auth_utils import hash_password
from .db import Base, engine, get_session
from .models import Admin, Club
from .validators import canonical_head_username

# Load .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Club Portal (FastAPI + SQLAlchemy)")

CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[CORS_ORIGIN],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(clubs.router)
app.include_router(events.router)
app.include_router(admin.router)

SEED_CLUBS = [
    ("Coding Club", "coding-club", "Coding-Head", "Programming and tech enthusiasts"),
    ("Cultural Club", "cultural-club", "Cultural-Head", "Arts and cultural activities"),
    ("Sports Club", "sports-club", None, "Sports and physical activities"),
    ("Literary Club", "literary-club", None, "Debates and literary activities"),
]


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"detail": f"Invalid request: {problems}"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(engine)
    with get_session() as session:
        seed_data(session)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def seed_data(session: Session) -> None:
    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    existing_admin = session.execute(
        select(Admin).where(Admin.username == admin_username)
    ).scalar_one_or_none()
    if not existing_admin:
        session.add(
            Admin(
                username=admin_username,
                password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "Admin123$")),
                name="Admin User",
            )
        )
        logger.info("Seeded bootstrap admin %r", admin_username)

    for name, slug, head_username, description in SEED_CLUBS:
        if session.execute(select(Club).where(Club.slug == slug)).scalar_one_or_none():
            continue
        session.add(
            Club(
                name=name,
                slug=slug,
                head_username=canonical_head_username(head_username) if head_username else None,
                description=description,
            )
        )
    session.flush()


@app.get("/")
def health():
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
