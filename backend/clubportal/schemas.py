from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class APIModel(BaseModel):
    """Wire names are ``_id`` and camelCase; Python code uses field names."""

    model_config = ConfigDict(populate_by_name=True)


# --- requests ---


class RegisterRequest(APIModel):
    role: str
    student_username: Optional[str] = Field(default=None, alias="studentUsername")
    student_password: Optional[str] = Field(default=None, alias="studentPassword")
    faculty_email: Optional[str] = Field(default=None, alias="facultyEmail")
    faculty_password: Optional[str] = Field(default=None, alias="facultyPassword")
    name: Optional[str] = None
    club_username: Optional[str] = Field(default=None, alias="clubUsername")
    club_password: Optional[str] = Field(default=None, alias="clubPassword")
    admin_id: Optional[str] = Field(default=None, alias="adminId")
    admin_password: Optional[str] = Field(default=None, alias="adminPassword")

    @field_validator("role")
    @classmethod
    def normalize_role(cls, value: str):
        return value.strip().lower()


class LoginRequest(APIModel):
    role: str
    username: str = ""
    password: str = ""

    @field_validator("role")
    @classmethod
    def normalize_role(cls, value: str):
        return value.strip().lower()


class JoinClubRequest(APIModel):
    club_id: str = Field(alias="clubId")


class MembershipResponse(APIModel):
    student_id: str = Field(alias="studentId")
    action: str


class EventCreate(APIModel):
    title: str
    description: str = ""
    date: datetime
    fund_request: Optional[float] = Field(default=None, alias="fundRequest", ge=0)

    @field_validator("title")
    @classmethod
    def must_not_be_empty(cls, value: str):
        cleaned = value.strip() if isinstance(value, str) else ""
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned

    @field_validator("date")
    @classmethod
    def to_naive_utc(cls, value: datetime):
        # Stored as naive UTC so ordering by date is correct across offsets
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class EventDecision(APIModel):
    event_id: str = Field(alias="eventId")
    action: str


class FundUpdate(APIModel):
    approved_fund: float = Field(alias="approvedFund", ge=0)


# --- responses ---


class MessageOut(BaseModel):
    message: str


class TokenOut(BaseModel):
    token: str
    role: str


class ClubRef(APIModel):
    id: str = Field(alias="_id")
    name: str


class ClubOut(APIModel):
    id: str = Field(alias="_id")
    name: str
    description: str
    image: Optional[str] = None
    slug: str


class EventOut(APIModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    date: datetime
    status: str
    club: Optional[ClubRef] = None
    fund_request: Optional[float] = Field(default=None, alias="fundRequest")
    approved_fund: Optional[float] = Field(default=None, alias="approvedFund")
    created_at: datetime = Field(alias="createdAt")

    @field_validator("date", "created_at")
    @classmethod
    def mark_utc(cls, value: datetime):
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class StudentRef(APIModel):
    id: str = Field(alias="_id")
    name: str
    username: str
    roll_number: str = Field(alias="rollNumber")


class ClubHeadDashboard(APIModel):
    id: str = Field(alias="_id")
    name: str
    slug: str
    description: str
    image: Optional[str] = None
    members: list[StudentRef]
    pending_requests: list[StudentRef] = Field(alias="pendingRequests")


class StudentDashboard(APIModel):
    id: str = Field(alias="_id")
    username: str
    name: str
    roll_number: str = Field(alias="rollNumber")
    joined_clubs: list[ClubOut] = Field(alias="joinedClubs")
    pending_requests: list[ClubOut] = Field(alias="pendingRequests")


class MemberRef(APIModel):
    id: str = Field(alias="_id")
    username: str


class FacultyClubOut(APIModel):
    id: str = Field(alias="_id")
    name: str
    members: list[MemberRef]


class DirectoryUser(BaseModel):
    username: str
    role: str


class FacultyDashboard(APIModel):
    pending_events: list[EventOut] = Field(alias="pendingEvents")
    clubs: list[FacultyClubOut]
    all_users: list[DirectoryUser] = Field(alias="allUsers")


class AdminUserOut(APIModel):
    id: str = Field(alias="_id")
    username: str
    name: str
    role: str
    email: Optional[str] = None


class AdminClubOut(APIModel):
    id: str = Field(alias="_id")
    name: str
    slug: str
    head_username: Optional[str] = Field(default=None, alias="headUsername")
    description: str
    image: Optional[str] = None
    member_count: int = Field(alias="memberCount")
    pending_count: int = Field(alias="pendingCount")
