"""
Student and course repositories — typed CRUD over ApiClient.

Each method is one API call. Inputs are validated locally first; a
ValidationError means nothing was sent. Classified API errors propagate
unchanged.
"""

from urllib.parse import quote

from .constants import DEFAULT_SORT
from .config import log
from .errors import NotFoundLocal, ValidationError
from .models import Course, Page, Student
from .responses import normalize_list, normalize_page
from .validation import validate_course, validate_course_codes, validate_student


def _seg(value):
    return quote(str(value), safe="")


def _students(items):
    return [Student.from_dict(s) for s in items if isinstance(s, dict)]


def _courses(items):
    return [Course.from_dict(c) for c in items if isinstance(c, dict)]


def _list(data, key, context):
    """List items of a response; an unrecognized shape degrades to [] with a warning."""
    result = normalize_list(data, key)
    if not result.ok:
        log.warning("Unexpected format for %s data: %r", context, result.raw)
        return []
    return result.items


def _require(data, what):
    if not isinstance(data, dict) or not data:
        raise NotFoundLocal(f"{what} not found")
    return data


class StudentRepository:
    def __init__(self, client):
        self._client = client

    def list_all(self):
        return _students(_list(self._client.get("/students"), "content", "students"))

    def list_paginated(self, page=0, size=10, sort=DEFAULT_SORT):
        if page < 0 or size < 1:
            raise ValidationError({"page": "Page must be >= 0 and size >= 1"})
        params = {"page": page, "size": size}
        if sort:
            params["sort"] = sort
        result = normalize_page(self._client.get("/students/paged", params=params))
        if not result.ok:
            log.warning("Unexpected format for student page: %r", result.raw)
            return Page(content=[], total_pages=0, number=page, size=size)
        return Page.from_dict(result.items[0], Student.from_dict)

    def get(self, student_id):
        return Student.from_dict(_require(self._client.get(f"/students/{_seg(student_id)}"),
                                          f"Student {student_id}"))

    def search(self, query):
        data = self._client.get("/students/search", params={"query": query})
        return _students(_list(data, "content", "student search"))

    def create(self, student):
        validate_student(student)
        created = self._client.post("/students", student.to_payload())
        log.info("Created student %s", student.email)
        return Student.from_dict(created) if isinstance(created, dict) else student

    def update(self, student_id, student):
        validate_student(student)
        if student.id is not None and student.id != student_id:
            raise ValidationError({"id": "Student id cannot be changed"})
        updated = self._client.put(f"/students/{_seg(student_id)}", student.to_payload())
        log.info("Updated student %s", student_id)
        if isinstance(updated, dict):
            return Student.from_dict(updated)
        return Student(student.first_name, student.last_name, student.email, id=student_id)

    def delete(self, student_id):
        self._client.delete(f"/students/{_seg(student_id)}")
        log.info("Deleted student %s", student_id)

    def get_courses(self, student_id):
        """Raw course entries for a student (course objects or bare codes), shape-normalized."""
        data = self._client.get(f"/students/{_seg(student_id)}/courses")
        return _list(data, "courses", f"student {student_id} courses")

    def get_enrolled_courses(self, student_id):
        return _courses(self.get_courses(student_id))

    def replace_courses(self, student_id, course_codes):
        """The one relationship write the API offers: set the student's entire course list."""
        codes = list(course_codes)
        validate_course_codes(codes)
        self._client.post(f"/students/{_seg(student_id)}/courses", codes)
        log.info("Student %s course list set to %s", student_id, codes)


class CourseRepository:
    def __init__(self, client):
        self._client = client

    def list_all(self):
        return _courses(_list(self._client.get("/courses"), "content", "courses"))

    def get(self, code):
        return Course.from_dict(_require(self._client.get(f"/courses/{_seg(code)}"), f"Course {code}"))

    def create(self, course):
        validate_course(course)
        created = self._client.post("/courses", course.to_payload())
        log.info("Created course %s", course.code)
        return Course.from_dict(created) if isinstance(created, dict) else course

    def update(self, code, course):
        validate_course(course)
        if course.code != code:
            raise ValidationError({"code": "Course code cannot be changed"})
        updated = self._client.put(f"/courses/{_seg(code)}", course.to_payload())
        log.info("Updated course %s", code)
        return Course.from_dict(updated) if isinstance(updated, dict) else course

    def delete(self, code):
        self._client.delete(f"/courses/{_seg(code)}")
        log.info("Deleted course %s", code)

    def get_students(self, code):
        data = self._client.get(f"/courses/{_seg(code)}/students")
        return _students(_list(data, "students", f"course {code} students"))

    def get_by_student(self, student_id):
        data = self._client.get(f"/courses/students/{_seg(student_id)}")
        return _courses(_list(data, "courses", f"student {student_id} courses"))

    def get_not_taken_by_student(self, student_id):
        data = self._client.get(f"/courses/not-taken/{_seg(student_id)}")
        return _courses(_list(data, "courses", "available courses"))
