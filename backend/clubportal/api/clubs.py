import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..deps import UserContext, ensure_club_head, ensure_student, get_db
from ..errors import NotFound, ValidationError
from ..models import Club, ClubMembership, Student
from ..schemas import (
    ClubHeadDashboard,
    ClubOut,
    JoinClubRequest,
    MembershipResponse,
    MessageOut,
    StudentDashboard,
)
from ..services import (
    club_students,
    get_head_club,
    get_membership,
    serialize_club,
    serialize_student_ref,
    student_clubs,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/clubs", response_model=list[ClubOut])
def list_clubs(db: Session = Depends(get_db)):
    clubs = db.execute(select(Club).order_by(Club.name.asc())).scalars().all()
    return [serialize_club(club) for club in clubs]


@router.get("/student/dashboard", response_model=StudentDashboard)
def student_dashboard(db: Session = Depends(get_db), user: UserContext = Depends(ensure_student)):
    student = db.get(Student, user.id)
    if not student:
        raise NotFound("Student not found")
    return StudentDashboard(
        id=student.id,
        username=student.username,
        name=student.name,
        roll_number=student.roll_number,
        joined_clubs=[serialize_club(c) for c in student_clubs(db, student.id, "member")],
        pending_requests=[serialize_club(c) for c in student_clubs(db, student.id, "pending")],
    )


@router.post("/student/join-club", response_model=MessageOut)
def join_club(
    payload: JoinClubRequest,
    db: Session = Depends(get_db),
    user: UserContext = Depends(ensure_student),
):
    student = db.get(Student, user.id)
    if not student:
        raise NotFound("Student not found")
    club = db.get(Club, payload.club_id)
    if not club:
        raise NotFound("Club not found")

    existing = get_membership(db, student.id, club.id)
    if existing:
        if existing.status == "member":
            return MessageOut(message="Already a member")
        return MessageOut(message="Request sent successfully!")

    db.add(ClubMembership(student_id=student.id, club_id=club.id, status="pending"))
    db.flush()
    logger.info("Student %s requested to join club %s", student.username, club.slug)
    return MessageOut(message="Request sent successfully!")


@router.get("/clubhead/dashboard", response_model=ClubHeadDashboard)
def club_head_dashboard(db: Session = Depends(get_db), user: UserContext = Depends(ensure_club_head)):
    club = get_head_club(db, user.id)
    return ClubHeadDashboard(
        id=club.id,
        name=club.name,
        slug=club.slug,
        description=club.description or "",
        image=club.image,
        members=[serialize_student_ref(s) for s in club_students(db, club.id, "member")],
        pending_requests=[serialize_student_ref(s) for s in club_students(db, club.id, "pending")],
    )


@router.post("/clubhead/respond", response_model=MessageOut)
def respond_to_request(
    payload: MembershipResponse,
    db: Session = Depends(get_db),
    user: UserContext = Depends(ensure_club_head),
):
    action = payload.action.strip().lower()
    if action not in {"accept", "reject"}:
        raise ValidationError("Invalid action. Use accept or reject")
    club = get_head_club(db, user.id)

    membership = get_membership(db, payload.student_id, club.id)
    if not membership or membership.status != "pending":
        raise NotFound("No pending request from this student")

    # One row holds both sides of the relation, so this is a single atomic change
    if action == "accept":
        membership.status = "member"
    else:
        db.delete(membership)
    db.flush()
    logger.info("Club %s %sed join request from student %s", club.slug, action, payload.student_id)
    return MessageOut(message=f"Request has been {action}ed.")
