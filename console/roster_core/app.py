"""
RosterConsole — the object a presentation layer talks to.

Owns one of each core component and wires them together:

  auth          SessionStore (durable file + ephemeral dict)
  client        ApiClient (bearer token from auth, 429s → cooldown advisory)
  students      StudentRepository
  courses       CourseRepository
  enrollment    EnrollmentReconciler
  dashboard     DashboardAggregator
  state         ConsoleState (in-flight guard, view tokens)
  notifications NotificationCenter

Mutating actions go through submit(): one in-flight call per action key,
API/transport failures posted as a dismissible notification and re-raised.
Validation errors are re-raised only; the form shows them inline.
"""

import time

from .constants import GENERIC_ERROR_TITLE, GENERIC_ERROR_MESSAGE, DEFAULT_PAGE_SIZE, DEFAULT_SORT
from .config import log, api_base_url, SESSION_FILE
from .auth import SessionStore, StaticCredentialVerifier
from .dashboard import DashboardAggregator
from .enrollment import EnrollmentReconciler
from .errors import RosterError, ValidationError, OperationInProgress, TransportError
from .http_client import ApiClient
from .models import Page
from .notifications import NotificationCenter, rate_limit_notifier
from .repositories import CourseRepository, StudentRepository
from .state import ConsoleState
from .storage import DurableStore, EphemeralStore


class RosterConsole:
    def __init__(self, base_url=None, verifier=None, durable=None, ephemeral=None,
                 http_session=None, clock=time.time, monotonic=time.monotonic, echo=False):
        self.notifications = NotificationCenter(echo=echo)
        self.rate_limit = rate_limit_notifier(self.notifications, clock=monotonic)
        self.auth = SessionStore(
            verifier or StaticCredentialVerifier(),
            durable if durable is not None else DurableStore(SESSION_FILE),
            ephemeral if ephemeral is not None else EphemeralStore(),
            clock=clock,
        )
        self.client = ApiClient(
            base_url or api_base_url(),
            token_provider=lambda: self.auth.token,
            rate_limit=self.rate_limit,
            session=http_session,
        )
        self.students = StudentRepository(self.client)
        self.courses = CourseRepository(self.client)
        self.enrollment = EnrollmentReconciler(self.students, self.courses)
        self.dashboard = DashboardAggregator(self.students, self.courses, clock=clock)
        self.state = ConsoleState()

    # ─── Session ─────────────────────────────────────────────

    def start(self) -> bool:
        """Restore any stored session. Call once at process start."""
        return self.auth.restore()

    def login(self, email, password, remember=False) -> bool:
        return self.auth.login(email, password, remember)

    def logout(self):
        self.auth.logout()

    # ─── Action plumbing ─────────────────────────────────────

    def submit(self, action, fn, *args, **kwargs):
        """Run a mutating call with the duplicate-submission guard."""
        try:
            with self.state.running(action):
                return fn(*args, **kwargs)
        except (ValidationError, OperationInProgress):
            raise
        except RosterError as e:
            self._recover(e)
            self._report(e)
            raise

    def load(self, view, token, fn, *args, **kwargs):
        """
        Run a read for `view`. Returns (applied, result); applied is False when
        the view was closed or reopened while the call was in flight. Failures
        of a stale view are re-raised without a notification.
        """
        try:
            result = fn(*args, **kwargs)
        except RosterError as e:
            self._recover(e)
            if self.state.is_current(view, token):
                self._report(e)
            raise
        if not self.state.is_current(view, token):
            log.debug("Dropping result for stale view %s (token %s)", view, token)
            return False, None
        return True, result

    def _recover(self, error):
        # A transport failure can leave pooled connections stale.
        if isinstance(error, TransportError):
            log.info("Resetting HTTP session after transport error: %s", error)
            self.client.reset()

    def _report(self, error):
        if error.applied_student_ids:
            self.notifications.push(
                "Enrollment partially applied",
                f"{len(error.applied_student_ids)} student(s) were enrolled before "
                f"the update for student {error.failed_student_id} failed.",
                variant="warning",
            )
        self.notifications.push(GENERIC_ERROR_TITLE, GENERIC_ERROR_MESSAGE, variant="destructive")

    # ─── Students ────────────────────────────────────────────

    def student_page(self, page=0, size=DEFAULT_PAGE_SIZE, query="", sort=DEFAULT_SORT):
        """One page of the student list; a non-empty query switches to server-side search."""
        if query.strip():
            found = self.students.search(query.strip())
            return Page(content=found, total_pages=1, total_elements=len(found), size=len(found))
        return self.students.list_paginated(page, size, sort)

    def save_student(self, student):
        if student.id is None:
            return self.submit(("student", "new"), self.students.create, student)
        return self.submit(("student", student.id), self.students.update, student.id, student)

    def delete_student(self, student_id):
        return self.submit(("student", student_id), self.students.delete, student_id)

    # ─── Courses ─────────────────────────────────────────────

    def save_course(self, course, is_new):
        if is_new:
            return self.submit(("course", "new"), self.courses.create, course)
        return self.submit(("course", course.code), self.courses.update, course.code, course)

    def delete_course(self, code):
        return self.submit(("course", code), self.courses.delete, code)

    # ─── Enrollment ──────────────────────────────────────────

    def enroll_student(self, student_id, codes):
        return self.submit(("enroll-student", student_id), self.enrollment.enroll_student, student_id, codes)

    def unenroll(self, student_id, code):
        return self.submit(("enroll-student", student_id), self.enrollment.unenroll, student_id, code)

    def enroll_students(self, code, student_ids):
        return self.submit(("enroll-course", code), self.enrollment.enroll_students, code, list(student_ids))

    def remove_student_from_course(self, code, student_id):
        return self.submit(("enroll-course", code), self.enrollment.remove_student, code, student_id)

    # ─── Dashboard ───────────────────────────────────────────

    def dashboard_stats(self):
        return self.dashboard.get_stats()
