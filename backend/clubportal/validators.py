import re

STUDENT_ROLL_NO = re.compile(r"^(22|23|24|25)BD1A05[A-G][0-9]$")
FACULTY_EMAIL = re.compile(r"^[A-Za-z]{5,15}[0-9]{0,3}@gmail\.com$")
FACULTY_NAME = re.compile(r"^[A-Za-z]{1,20}$")
STRONG_PASSWORD = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[!@#$%^&*]).{10,}$")
CLUB_PASSWORD = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[!@#$%^&*]).{8,}$")
CLUB_HEAD_USERNAME = re.compile(r"^[A-Za-z]+-Head$", re.IGNORECASE)
ADMIN_ID = re.compile(r"^[a-zA-Z0-9]{4,20}$")

_HEAD_SUFFIX = re.compile(r"(-head)+$", re.IGNORECASE)


def _matches(pattern: re.Pattern, value: str | None) -> bool:
    # fullmatch: a trailing newline must not slip past ``$``
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def validate_student_roll_no(roll_no: str | None) -> bool:
    return _matches(STUDENT_ROLL_NO, roll_no)


def validate_faculty_email(email: str | None) -> bool:
    return _matches(FACULTY_EMAIL, email)


def validate_faculty_name(name: str | None) -> bool:
    return _matches(FACULTY_NAME, name)


def validate_strong_password(password: str | None) -> bool:
    return _matches(STRONG_PASSWORD, password)


def validate_club_password(password: str | None) -> bool:
    return _matches(CLUB_PASSWORD, password)


def validate_club_head_username(username: str | None) -> bool:
    return _matches(CLUB_HEAD_USERNAME, username)


def validate_admin_id(admin_id: str | None) -> bool:
    return _matches(ADMIN_ID, admin_id)


def canonical_head_username(username: str) -> str:
    """``coding``, ``Coding-head`` and ``Coding-Head-Head`` all become ``<base>-Head``."""
    base = _HEAD_SUFFIX.sub("", username.strip())
    return f"{base}-Head"
