"""
Shared fixtures: fake HTTP responses, a controllable clock, in-memory stores.

ROSTER_HOME must point somewhere disposable before roster_core is imported
(config.py creates its directory and log file at import time).
"""

import json
import os
import tempfile

os.environ.setdefault("ROSTER_HOME", tempfile.mkdtemp(prefix="roster-test-"))

from unittest.mock import MagicMock

import pytest
import requests

from roster_core.http_client import ApiClient
from roster_core.notifications import CooldownNotifier
from roster_core.storage import EphemeralStore


BASE_URL = "http://api.test/api"


def make_response(status=200, body=None, reason="OK", raw=None):
    """A real requests.Response with the given status and JSON (or raw) body."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    if raw is not None:
        resp._content = raw.encode("utf-8")
    elif body is not None:
        resp._content = json.dumps(body).encode("utf-8")
    else:
        resp._content = b""
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def http():
    """Mocked requests.Session; set http.request.return_value / side_effect per test."""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, [])
    return session


@pytest.fixture
def advisories():
    return []


@pytest.fixture
def rate_limit(advisories, clock):
    return CooldownNotifier(lambda: advisories.append("rate-limit"), cooldown=30, clock=clock)


@pytest.fixture
def client(http, rate_limit):
    return ApiClient(BASE_URL, token_provider=lambda: "tok-123", rate_limit=rate_limit, session=http)


@pytest.fixture
def durable():
    return EphemeralStore()


@pytest.fixture
def ephemeral():
    return EphemeralStore()


class FakeRosterApi:
    """
    In-memory stand-in for the remote API, installed as the side_effect of
    the mocked session's request(). Only the enrollment endpoints are modelled;
    `fail_writes_for` makes the course-list POST for those students return 500.
    """

    def __init__(self, students, courses):
        self.students = {s["id"]: dict(s) for s in students}
        self.courses = {c["code"]: dict(c) for c in courses}
        self.enrolled = {s["id"]: [] for s in students}
        self.writes = []
        self.fail_writes_for = set()

    def _course(self, code):
        return {k: v for k, v in self.courses[code].items() if k != "students"}

    def __call__(self, method, url, **kwargs):
        path = url[len(BASE_URL):]
        parts = path.strip("/").split("/")

        if parts == ["students"] and method == "GET":
            return make_response(200, list(self.students.values()))
        if parts == ["courses"] and method == "GET":
            return make_response(200, [self._course(c) for c in self.courses])
        if len(parts) == 3 and parts[0] == "students" and parts[2] == "courses":
            sid = int(parts[1])
            if method == "GET":
                return make_response(200, [self._course(c) for c in self.enrolled[sid]])
            if sid in self.fail_writes_for:
                return make_response(500, {"message": "Database unavailable"}, reason="Server Error")
            self.writes.append((sid, list(kwargs["json"])))
            self.enrolled[sid] = list(kwargs["json"])
            return make_response(200)
        if len(parts) == 3 and parts[0] == "courses" and parts[2] == "students":
            code = parts[1]
            return make_response(200, [self.students[s] for s, codes in self.enrolled.items() if code in codes])
        if len(parts) == 3 and parts[:2] == ["courses", "not-taken"]:
            sid = int(parts[2])
            return make_response(200, [self._course(c) for c in self.courses if c not in self.enrolled[sid]])
        return make_response(404, {"message": f"No route for {method} {path}"}, reason="Not Found")


@pytest.fixture
def roster_api(http):
    api = FakeRosterApi(
        students=[
            {"id": 1, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"},
            {"id": 2, "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com"},
            {"id": 3, "firstName": "Grace", "lastName": "Hopper", "email": "grace@example.com"},
            {"id": 42, "firstName": "Douglas", "lastName": "Adams", "email": "douglas@example.com"},
        ],
        courses=[
            {"code": "CS101", "title": "Intro to CS", "description": ""},
            {"code": "MATH200", "title": "Linear Algebra", "description": ""},
            {"code": "PHY110", "title": "Mechanics", "description": ""},
        ],
    )
    http.request.side_effect = api
    return api
