import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..deps import UserContext, ensure_club_head, ensure_faculty, get_db
from ..models import Club, ClubHead, ClubMembership, Event, Student
from ..schemas import (
    DirectoryUser,
    EventCreate,
    EventDecision,
    EventOut,
    FacultyClubOut,
    FacultyDashboard,
    MemberRef,
    MessageOut,
)
from ..services import (
    approved_events,
    base_event_query,
    get_head_club,
    serialize_event,
    set_event_status,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/events/approved", response_model=list[EventOut])
def list_approved_events(db: Session = Depends(get_db)):
    return approved_events(db)


@router.post("/clubhead/events", response_model=MessageOut, status_code=201)
def propose_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(ensure_club_head),
):
    club = get_head_club(db, user.id)
    event = Event(
        title=payload.title,
        description=payload.description,
        date=payload.date,
        club_id=club.id,
        status="pending",
        fund_request=payload.fund_request,
    )
    db.add(event)
    db.flush()
    logger.info("Club %s proposed event %s (%s)", club.slug, event.id, event.title)
    return MessageOut(message="Event proposal submitted successfully!")


@router.get("/clubhead/my-events", response_model=list[EventOut])
def my_events(db: Session = Depends(get_db), user: UserContext = Depends(ensure_club_head)):
    club = get_head_club(db, user.id)
    events = (
        db.execute(base_event_query().where(Event.club_id == club.id).order_by(Event.date.asc()))
        .scalars()
        .all()
    )
    return [serialize_event(event) for event in events]


@router.get("/faculty/dashboard", response_model=FacultyDashboard)
def faculty_dashboard(db: Session = Depends(get_db), user: UserContext = Depends(ensure_faculty)):
    pending = (
        db.execute(base_event_query().where(Event.status == "pending").order_by(Event.date.asc()))
        .scalars()
        .all()
    )
    clubs = (
        db.execute(
            select(Club)
            .options(selectinload(Club.memberships).selectinload(ClubMembership.student))
            .order_by(Club.name.asc())
        )
        .scalars()
        .all()
    )
    club_out = [
        FacultyClubOut(
            id=club.id,
            name=club.name,
            members=[
                MemberRef(id=m.student.id, username=m.student.username)
                for m in club.memberships
                if m.status == "member"
            ],
        )
        for club in clubs
    ]
    students = db.execute(select(Student.username).order_by(Student.username.asc())).scalars().all()
    heads = db.execute(select(ClubHead.username).order_by(ClubHead.username.asc())).scalars().all()
    all_users = [DirectoryUser(username=s, role="Student") for s in students] + [
        DirectoryUser(username=h, role="Club Head") for h in heads
    ]
    return FacultyDashboard(
        pending_events=[serialize_event(event) for event in pending],
        clubs=club_out,
        all_users=all_users,
    )


@router.post("/faculty/events/respond", response_model=MessageOut)
def respond_to_event(
    payload: EventDecision,
    db: Session = Depends(get_db),
    user: UserContext = Depends(ensure_faculty),
):
    action = payload.action.strip().lower()
    set_event_status(db, payload.event_id, action, actor=f"faculty {user.username}")
    return MessageOut(message=f"Event has been successfully {action}.")
