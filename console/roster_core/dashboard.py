"""
Dashboard summary: totals, students-per-course ratio, sample enrollments.

The "recent enrollments" are synthetic: student i paired with course
i mod n, dated i days back. There is no enrollment-event history to query.
Any classified failure yields zeroed stats instead of an exception.
"""

import time
from datetime import datetime, timezone, timedelta

from .constants import RECENT_ENROLLMENTS_MAX
from .config import log
from .errors import RosterError
from .models import DashboardStats, RecentEnrollment


def format_ratio(total_students, total_courses):
    if total_courses <= 0:
        return "0"
    return f"{total_students / total_courses:.1f}"


def recent_enrollments(students, courses, now, limit=RECENT_ENROLLMENTS_MAX):
    if not courses:
        return []
    base = datetime.fromtimestamp(now, tz=timezone.utc)
    result = []
    for i, student in enumerate(students[:limit]):
        date = (base - timedelta(days=i)).isoformat().replace("+00:00", "Z")
        result.append(RecentEnrollment(student, courses[i % len(courses)], date))
    return result


class DashboardAggregator:
    def __init__(self, students, courses, clock=time.time):
        self._students = students
        self._courses = courses
        self._clock = clock

    def get_stats(self) -> DashboardStats:
        try:
            students = self._students.list_all()
            courses = self._courses.list_all()
        except RosterError as e:
            log.error("Failed to load dashboard data: %s", e)
            return DashboardStats()

        return DashboardStats(
            total_students=len(students),
            total_courses=len(courses),
            student_course_ratio=format_ratio(len(students), len(courses)),
            recent_enrollments=recent_enrollments(students, courses, self._clock()),
        )
