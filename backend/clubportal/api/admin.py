import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from ..deps import UserContext, ensure_admin, get_db
from ..errors import NotFound
from ..models import Admin, Club, ClubHead, ClubMembership, Event, Faculty, Student
from ..schemas import AdminClubOut, AdminUserOut, EventOut, FundUpdate, MessageOut
from ..services import base_event_query, membership_count, serialize_event, set_event_status

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/admin/events", response_model=list[EventOut])
def all_events(db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    events = db.execute(base_event_query().order_by(Event.date.desc())).scalars().all()
    return [serialize_event(event) for event in events]


@router.get("/admin/users", response_model=list[AdminUserOut])
def all_users(db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    users: list[AdminUserOut] = []
    for student in db.execute(select(Student).order_by(Student.username.asc())).scalars():
        users.append(AdminUserOut(id=student.id, username=student.username, name=student.name, role="student"))
    for member in db.execute(select(Faculty).order_by(Faculty.username.asc())).scalars():
        users.append(
            AdminUserOut(id=member.id, username=member.username, name=member.name, role="faculty", email=member.email)
        )
    for head in db.execute(select(ClubHead).order_by(ClubHead.username.asc())).scalars():
        users.append(AdminUserOut(id=head.id, username=head.username, name=head.name, role="clubhead"))
    for admin in db.execute(select(Admin).order_by(Admin.username.asc())).scalars():
        users.append(AdminUserOut(id=admin.id, username=admin.username, name=admin.name, role="admin"))
    return users


@router.get("/admin/clubs", response_model=list[AdminClubOut])
def all_clubs(db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    clubs = db.execute(select(Club).order_by(Club.name.asc())).scalars().all()
    return [
        AdminClubOut(
            id=club.id,
            name=club.name,
            slug=club.slug,
            head_username=club.head_username,
            description=club.description or "",
            image=club.image,
            member_count=membership_count(db, club.id, "member"),
            pending_count=membership_count(db, club.id, "pending"),
        )
        for club in clubs
    ]


@router.get("/admin/fund-requests", response_model=list[EventOut])
def fund_requests(db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    events = (
        db.execute(
            base_event_query()
            .where(or_(Event.fund_request.is_not(None), Event.approved_fund.is_not(None)))
            .order_by(Event.date.asc())
        )
        .scalars()
        .all()
    )
    return [serialize_event(event) for event in events]


@router.post("/admin/events/{event_id}/approve", response_model=MessageOut)
def approve_event(event_id: str, db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    set_event_status(db, event_id, "approved", actor=f"admin {user.username}")
    return MessageOut(message="Event approved")


@router.post("/admin/events/{event_id}/reject", response_model=MessageOut)
def reject_event(event_id: str, db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    set_event_status(db, event_id, "rejected", actor=f"admin {user.username}")
    return MessageOut(message="Event rejected")


@router.post("/admin/events/{event_id}/update-funds", response_model=MessageOut)
def update_funds(
    event_id: str,
    payload: FundUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(ensure_admin),
):
    event = db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found.")
    event.approved_fund = payload.approved_fund
    db.flush()
    logger.info("Admin %s set approved fund %.2f on event %s", user.username, payload.approved_fund, event.id)
    return MessageOut(message="Approved fund updated")


@router.delete("/admin/users/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, db: Session = Depends(get_db), user: UserContext = Depends(ensure_admin)):
    student = db.get(Student, user_id)
    if student:
        # No dangling references left behind in club member/pending lists
        db.execute(delete(ClubMembership).where(ClubMembership.student_id == student.id))
        db.delete(student)
        logger.info("Admin %s deleted student %s", user.username, student.username)
        return MessageOut(message="User permanently deleted")

    for model in (Faculty, ClubHead):
        identity = db.get(model, user_id)
        if identity:
            db.delete(identity)
            logger.info("Admin %s deleted %s %s", user.username, model.__tablename__, identity.username)
            return MessageOut(message="User permanently deleted")

    raise NotFound("User not found")
