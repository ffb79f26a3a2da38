"""
Enrollment reconciler — edge-level add/remove over a list-replacement API.

The server only lets us set a student's *entire* course-code list
(POST /students/{id}/courses). Adding or removing one edge is therefore a
read-modify-write on that list:

  1. read the student's current codes
  2. reconcile(): current ∪ add − remove
  3. replace the list (skipped when nothing changed)
  4. re-fetch the view that started the operation

Multi-student operations run the cycle once per student, strictly in order.
The first failure aborts the rest; students already written stay written.
Not safe against a second session editing the same student concurrently
(lost update).
"""

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .config import log
from .errors import RosterError
from .models import Enrollment


# ─── Pure planning ───────────────────────────────────────────────

@dataclass(frozen=True)
class EnrollmentPlan:
    student_id: int
    current: Tuple[str, ...]
    desired: Tuple[str, ...]

    @property
    def changed(self) -> bool:
        return set(self.current) != set(self.desired)

    @property
    def added(self) -> FrozenSet[Enrollment]:
        return edges(self.student_id, set(self.desired) - set(self.current))

    @property
    def removed(self) -> FrozenSet[Enrollment]:
        return edges(self.student_id, set(self.current) - set(self.desired))


def edges(student_id, codes):
    return frozenset(Enrollment(student_id, code) for code in codes)


def reconcile(student_id, current_codes, add=(), remove=()):
    """
    Plan the replacement list for one student.

    Keeps the order of `current_codes`, appends new codes in the order given,
    drops duplicates. A code in both `add` and `remove` ends up removed.
    """
    dropped = set(remove)
    desired = []
    for code in list(current_codes) + list(add):
        if code not in dropped and code not in desired:
            desired.append(code)
    return EnrollmentPlan(student_id, tuple(dict.fromkeys(current_codes)), tuple(desired))


def course_codes(entries):
    """Codes from a student's course entries (course objects or bare code strings)."""
    codes = []
    for entry in entries:
        if isinstance(entry, str):
            code = entry
        elif isinstance(entry, dict):
            code = entry.get("code")
        else:
            code = getattr(entry, "code", None)
        if code and code not in codes:
            codes.append(code)
    return codes


# ─── Applying plans ──────────────────────────────────────────────

class EnrollmentReconciler:
    def __init__(self, students, courses):
        self._students = students
        self._courses = courses

    def current_codes(self, student_id):
        return course_codes(self._students.get_courses(student_id))

    def _apply(self, student_id, add=(), remove=()):
        plan = reconcile(student_id, self.current_codes(student_id), add=add, remove=remove)
        if not plan.changed:
            log.info("Student %s enrollment unchanged (%s)", student_id, list(plan.current))
            return plan
        self._students.replace_courses(student_id, plan.desired)
        log.info("Student %s enrollment: +%s -%s",
                 student_id,
                 sorted(e.course_code for e in plan.added),
                 sorted(e.course_code for e in plan.removed))
        return plan

    # ── Student-detail view (returns the student's refreshed courses) ──

    def enroll_student(self, student_id, codes):
        """Add several courses to one student."""
        self._apply(student_id, add=list(codes))
        return self._students.get_enrolled_courses(student_id)

    def enroll_student_in_course(self, student_id, code):
        return self.enroll_student(student_id, [code])

    def unenroll(self, student_id, code):
        """Remove one course from a student."""
        self._apply(student_id, remove=[code])
        return self._students.get_enrolled_courses(student_id)

    def available_courses(self, student_id):
        return self._courses.get_not_taken_by_student(student_id)

    # ── Course-detail view (returns the course's refreshed students) ──

    def enroll_students(self, code, student_ids):
        """
        Add several students to one course, one student at a time.

        On failure the classified error is re-raised as-is, with
        `failed_student_id` and `applied_student_ids` set; earlier writes are
        not rolled back.
        """
        applied = []
        for student_id in student_ids:
            try:
                self._apply(student_id, add=[code])
            except RosterError as e:
                log.error("Enrolling student %s in %s failed after %d of %d: %s",
                          student_id, code, len(applied), len(student_ids), e)
                e.failed_student_id = student_id
                e.applied_student_ids = tuple(applied)
                raise
            applied.append(student_id)
        return self._courses.get_students(code)

    def remove_student(self, code, student_id):
        """Remove one student from a course (writes the student's side)."""
        self._apply(student_id, remove=[code])
        return self._courses.get_students(code)

    def available_students(self, code):
        enrolled = {s.id for s in self._courses.get_students(code)}
        return [s for s in self._students.list_all() if s.id not in enrolled]
