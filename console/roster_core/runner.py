"""
Command-line entry point: restore or create a session, print the dashboard.
"""

import argparse
import getpass
import sys

from .constants import CONSOLE_VERSION
from .config import log, safe_print
from .app import RosterConsole


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="roster", description="Student/course roster console")
    parser.add_argument("--api", help="API base URL (overrides config and ROSTER_API_URL)")
    parser.add_argument("--remember", action="store_true", help="keep the session for 7 days")
    parser.add_argument("--logout", action="store_true", help="clear the stored session and exit")
    return parser.parse_args(argv)


def _prompt_login(console, remember):
    for _ in range(3):
        email = input("Email: ").strip()
        password = getpass.getpass("Password: ")
        if console.login(email, password, remember):
            return True
        safe_print(console.auth.error)
    return False


def main(argv=None):
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    safe_print("Roster Console v" + CONSOLE_VERSION)

    console = RosterConsole(base_url=args.api, echo=True)

    if args.logout:
        console.logout()
        safe_print("Logged out.")
        return 0

    if not console.start() and not _prompt_login(console, args.remember):
        log.warning("Giving up after repeated failed logins")
        return 1

    user = console.auth.user
    safe_print(f"Signed in as {user.name} <{user.email}> ({user.role})")

    stats = console.dashboard_stats()
    safe_print()
    safe_print(f"Students:             {stats.total_students}")
    safe_print(f"Courses:              {stats.total_courses}")
    safe_print(f"Students per course:  {stats.student_course_ratio}")
    if stats.recent_enrollments:
        safe_print("Recent enrollments:")
        for item in stats.recent_enrollments:
            safe_print(f"  {item.date[:10]}  {item.student.full_name:<30} {item.course.code}")
    return 0
