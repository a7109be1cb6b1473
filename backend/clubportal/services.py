import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from .errors import NotFound, ValidationError
from .models import Club, ClubHead, ClubMembership, Event, Student
from .schemas import ClubOut, ClubRef, EventOut, StudentRef

logger = logging.getLogger(__name__)

EVENT_STATUSES = {"pending", "approved", "rejected"}


def serialize_club(club: Club) -> ClubOut:
    return ClubOut(
        id=club.id,
        name=club.name,
        description=club.description or "",
        image=club.image,
        slug=club.slug,
    )


def serialize_event(event: Event) -> EventOut:
    return EventOut(
        id=event.id,
        title=event.title,
        description=event.description or "",
        date=event.date,
        status=event.status,
        club=ClubRef(id=event.club.id, name=event.club.name) if event.club else None,
        fund_request=event.fund_request,
        approved_fund=event.approved_fund,
        created_at=event.created_at,
    )


def serialize_student_ref(student: Student) -> StudentRef:
    return StudentRef(
        id=student.id,
        name=student.name,
        username=student.username,
        roll_number=student.roll_number,
    )


def base_event_query():
    return select(Event).options(selectinload(Event.club))


def get_head_club(db: Session, head_id: str) -> Club:
    """Resolve the club bound to a club head, or raise NotFound."""
    head = db.get(ClubHead, head_id)
    if not head:
        raise NotFound("Club head not found")
    club = db.get(Club, head.club_id) if head.club_id else None
    if not club:
        raise NotFound("Could not find the club for this user.")
    return club


def get_membership(db: Session, student_id: str, club_id: str) -> ClubMembership | None:
    return db.execute(
        select(ClubMembership).where(
            ClubMembership.student_id == student_id,
            ClubMembership.club_id == club_id,
        )
    ).scalar_one_or_none()


def club_students(db: Session, club_id: str, status: str) -> list[Student]:
    return (
        db.execute(
            select(Student)
            .join(ClubMembership, ClubMembership.student_id == Student.id)
            .where(ClubMembership.club_id == club_id, ClubMembership.status == status)
            .order_by(Student.username.asc())
        )
        .scalars()
        .all()
    )


def student_clubs(db: Session, student_id: str, status: str) -> list[Club]:
    return (
        db.execute(
            select(Club)
            .join(ClubMembership, ClubMembership.club_id == Club.id)
            .where(ClubMembership.student_id == student_id, ClubMembership.status == status)
            .order_by(Club.name.asc())
        )
        .scalars()
        .all()
    )


def membership_count(db: Session, club_id: str, status: str) -> int:
    return (
        db.execute(
            select(func.count(ClubMembership.id)).where(
                ClubMembership.club_id == club_id,
                ClubMembership.status == status,
            )
        ).scalar()
        or 0
    )


def set_event_status(db: Session, event_id: str, status: str, actor: str) -> Event:
    """Single transition path shared by the faculty and admin endpoints.

    Transitions are not restricted to pending events; any status may be set again.
    """
    if status not in EVENT_STATUSES - {"pending"}:
        raise ValidationError("Invalid action.")
    event = db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found.")
    previous = event.status
    event.status = status
    db.flush()
    logger.info("Event %s moved %s -> %s by %s", event.id, previous, status, actor)
    return event


def approved_events(db: Session) -> list[EventOut]:
    events = (
        db.execute(base_event_query().where(Event.status == "approved").order_by(Event.date.asc()))
        .scalars()
        .all()
    )
    return [serialize_event(event) for event in events]
