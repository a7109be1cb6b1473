import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth_utils import create_access_token, hash_password, verify_password
from ..deps import get_db
from ..errors import (
    AlreadyAssignedError,
    DuplicateError,
    InvalidCredentials,
    NotConfiguredError,
    ValidationError,
)
from ..models import Admin, Club, ClubHead, Faculty, Student
from ..schemas import LoginRequest, MessageOut, RegisterRequest, TokenOut
from ..validators import (
    canonical_head_username,
    validate_admin_id,
    validate_club_head_username,
    validate_club_password,
    validate_faculty_email,
    validate_faculty_name,
    validate_strong_password,
    validate_student_roll_no,
)

logger = logging.getLogger(__name__)

router = APIRouter()

IDENTITY_MODELS = {
    "student": Student,
    "faculty": Faculty,
    "clubhead": ClubHead,
    "admin": Admin,
}


def _save(db: Session, identity) -> None:
    db.add(identity)
    try:
        db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same key
        db.rollback()
        raise DuplicateError("username already exists")


def _register_student(db: Session, payload: RegisterRequest) -> str:
    username = payload.student_username
    if not validate_student_roll_no(username):
        raise ValidationError("Invalid Roll No format. Use format like: 23BD1A05C7")
    if payload.student_password != username:
        raise ValidationError("Password must match Roll No")
    if db.execute(select(Student).where(Student.username == username)).scalar_one_or_none():
        raise DuplicateError("Student already exists")
    _save(
        db,
        Student(
            username=username,
            password_hash=hash_password(payload.student_password),
            name=username,
            roll_number=username,
        ),
    )
    return "Student registration successful"


def _register_faculty(db: Session, payload: RegisterRequest) -> str:
    email = payload.faculty_email
    if not validate_faculty_email(email):
        raise ValidationError("Invalid email format. Use: 5-15 letters + optional digits + @gmail.com")
    if not validate_faculty_name(payload.name):
        raise ValidationError("Invalid name format. Only letters (1-20 characters)")
    if not validate_strong_password(payload.faculty_password):
        raise ValidationError(
            "Invalid password format. Must contain uppercase, lowercase, number, "
            "and special character (min 10 characters)"
        )
    if db.execute(select(Faculty).where(func.lower(Faculty.username) == email.lower())).scalar_one_or_none():
        raise DuplicateError("Faculty already exists")
    _save(
        db,
        Faculty(
            username=email,
            password_hash=hash_password(payload.faculty_password),
            name=payload.name,
            email=email,
        ),
    )
    return "Faculty registration successful"


def _register_club_head(db: Session, payload: RegisterRequest) -> str:
    if not validate_club_head_username(payload.club_username):
        raise ValidationError("Invalid club username format. Use: Clubname-Head")
    if not validate_club_password(payload.club_password):
        raise ValidationError(
            "Invalid password format. Must contain uppercase, lowercase, number, "
            "and special character (min 8 characters)"
        )
    username = canonical_head_username(payload.club_username)
    lowered = username.lower()

    club = db.execute(
        select(Club).where(func.lower(Club.head_username) == lowered)
    ).scalar_one_or_none()
    if not club:
        raise NotConfiguredError("This club is not configured for a head or the username is incorrect.")

    existing = db.execute(
        select(ClubHead).where(
            (func.lower(ClubHead.username) == lowered) | (ClubHead.club_id == club.id)
        )
    ).first()
    if existing:
        raise AlreadyAssignedError("This club already has a head assigned.")

    _save(
        db,
        ClubHead(
            username=username,
            password_hash=hash_password(payload.club_password),
            name=f"{username[: -len('-Head')]} Head",
            club_id=club.id,
        ),
    )
    return "Club Head registration successful"


def _register_admin(db: Session, payload: RegisterRequest) -> str:
    admin_id = payload.admin_id
    if not validate_admin_id(admin_id):
        raise ValidationError("Invalid Admin ID format. Use 4-20 alphanumeric characters")
    if not validate_club_password(payload.admin_password):
        raise ValidationError(
            "Invalid password format. Must contain uppercase, lowercase, number, and special character"
        )
    if db.execute(select(Admin).where(func.lower(Admin.username) == admin_id.lower())).scalar_one_or_none():
        raise DuplicateError("Admin already exists")
    _save(
        db,
        Admin(
            username=admin_id,
            password_hash=hash_password(payload.admin_password),
            name=f"Admin {admin_id}",
        ),
    )
    return "Admin registration successful"


REGISTRARS = {
    "student": _register_student,
    "faculty": _register_faculty,
    "clubhead": _register_club_head,
    "admin": _register_admin,
}


@router.post("/register", response_model=MessageOut)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    registrar = REGISTRARS.get(payload.role)
    if not registrar:
        raise ValidationError("Invalid role")
    message = registrar(db, payload)
    logger.info("Registered new %s identity", payload.role)
    return MessageOut(message=message)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    model = IDENTITY_MODELS.get(payload.role)
    if not model:
        raise InvalidCredentials()

    username = payload.username.strip()
    if payload.role == "clubhead":
        username = canonical_head_username(username)

    identity = (
        db.execute(
            select(model)
            .where(func.lower(model.username) == username.lower())
            .order_by(model.created_at.asc())
        )
        .scalars()
        .first()
    )
    # Same error for unknown user and wrong password
    if not identity or not verify_password(payload.password, identity.password_hash):
        logger.warning("Failed %s login for %r", payload.role, username)
        raise InvalidCredentials()

    token = create_access_token(
        identity_id=identity.id,
        role=payload.role,
        username=identity.username,
        name=identity.name,
    )
    logger.info("%s %s logged in", payload.role, identity.username)
    return TokenOut(token=token, role=payload.role)
