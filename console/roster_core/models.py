"""
Typed records exchanged with the remote API.

Wire payloads are camelCase JSON; the dataclasses are snake_case and convert
with from_dict() / to_payload(). Denormalized relationship lists (Student.courses,
Course.students) are carried through but never treated as authoritative.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Course:
    code: str
    title: str
    description: str = ""
    students: Optional[List["Student"]] = None

    @classmethod
    def from_dict(cls, data):
        students = data.get("students")
        return cls(
            code=data.get("code", ""),
            title=data.get("title", ""),
            description=data.get("description") or "",
            students=[Student.from_dict(s) for s in students if isinstance(s, dict)]
            if isinstance(students, list) else None,
        )

    def to_payload(self):
        return {"code": self.code, "title": self.title, "description": self.description}


@dataclass
class Student:
    first_name: str
    last_name: str
    email: str
    id: Optional[int] = None
    courses: Optional[List[Course]] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data):
        courses = data.get("courses")
        return cls(
            id=data.get("id"),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            courses=[Course.from_dict(c) for c in courses if isinstance(c, dict)]
            if isinstance(courses, list) else None,
        )

    def to_payload(self):
        """Body for create/update. The id is server-owned and never sent."""
        return {"firstName": self.first_name, "lastName": self.last_name, "email": self.email}


@dataclass(frozen=True)
class Enrollment:
    """One student↔course edge. No identity beyond the pair."""
    student_id: int
    course_code: str


@dataclass
class Page:
    content: list
    total_pages: int = 1
    total_elements: int = 0
    size: int = 0
    number: int = 0
    first: bool = True
    last: bool = True

    @property
    def empty(self) -> bool:
        return not self.content

    @classmethod
    def from_dict(cls, data, item_factory):
        content = [item_factory(item) for item in data.get("content") or [] if isinstance(item, dict)]
        number = data.get("number") or 0
        total_pages = data.get("totalPages")
        if not isinstance(total_pages, int):
            total_pages = 1 if content else 0
        first = data.get("first")
        last = data.get("last")
        return cls(
            content=content,
            total_pages=total_pages,
            total_elements=data.get("totalElements") or len(content),
            size=data.get("size") or len(content),
            number=number,
            first=first if isinstance(first, bool) else number == 0,
            last=last if isinstance(last, bool) else number >= total_pages - 1,
        )


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    name: str
    role: str  # "admin" | "user"

    @classmethod
    def from_dict(cls, data):
        role = data["role"]
        if role not in ("admin", "user"):
            raise ValueError(f"unknown role {role!r}")
        return cls(id=int(data["id"]), email=str(data["email"]), name=str(data["name"]), role=role)

    def to_dict(self):
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role}


@dataclass(frozen=True)
class Session:
    identity: Identity
    token: str
    expires_at: Optional[float] = None   # epoch seconds; None for ephemeral sessions
    durable: bool = False

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


@dataclass(frozen=True)
class RecentEnrollment:
    student: Student
    course: Course
    date: str   # ISO-8601, UTC


@dataclass
class DashboardStats:
    total_students: int = 0
    total_courses: int = 0
    student_course_ratio: str = "0"
    recent_enrollments: List[RecentEnrollment] = field(default_factory=list)
