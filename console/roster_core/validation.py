"""
Input checks run before any create/update/replace call.

Violations raise ValidationError with one message per field; nothing is sent.
"""

import re

from .constants import COURSE_CODE_PATTERN, COURSE_TITLE_MAX, COURSE_DESCRIPTION_MAX, EMAIL_PATTERN
from .errors import ValidationError

_CODE_RE = re.compile(COURSE_CODE_PATTERN)
_EMAIL_RE = re.compile(EMAIL_PATTERN)


def is_valid_course_code(code) -> bool:
    return isinstance(code, str) and _CODE_RE.fullmatch(code) is not None


def validate_course(course):
    errors = {}
    if not is_valid_course_code(course.code):
        errors["code"] = "Course code must be 2-10 uppercase letters or digits"
    title = course.title or ""
    if not title:
        errors["title"] = "Course title is required"
    elif len(title) > COURSE_TITLE_MAX:
        errors["title"] = f"Course title cannot exceed {COURSE_TITLE_MAX} characters"
    if len(course.description or "") > COURSE_DESCRIPTION_MAX:
        errors["description"] = f"Course description cannot exceed {COURSE_DESCRIPTION_MAX} characters"
    if errors:
        raise ValidationError(errors)


def validate_student(student):
    errors = {}
    if not (student.first_name or "").strip():
        errors["firstName"] = "First name is required"
    if not (student.last_name or "").strip():
        errors["lastName"] = "Last name is required"
    if not _EMAIL_RE.fullmatch(student.email or ""):
        errors["email"] = "Please enter a valid email address"
    if errors:
        raise ValidationError(errors)


def validate_course_codes(codes):
    bad = [c for c in codes if not is_valid_course_code(c)]
    if bad:
        raise ValidationError({"courseCodes": f"Invalid course code(s): {', '.join(map(str, bad))}"})
