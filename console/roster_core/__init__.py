"""
roster_core — Student/Course Roster Console v1.2
================================================
Architecture: thin client over a remote REST API. Blocking calls, no
background threads of its own; a GUI host runs actions on worker threads.

  constants.py     → Version, timeouts, storage keys, validation limits
  config.py        → Paths, logging, config load/save, helpers
  errors.py        → Classified failures (validation, API, 429, transport)
  models.py        → Student / Course / Session / Page dataclasses
  validation.py    → Local input checks (nothing is sent on failure)
  storage.py       → Durable (file) and ephemeral (memory) key/value stores
  auth.py          → SessionStore + pluggable credential verification
  notifications.py → Notification center, rate-limit advisory cooldown
  http_client.py   → ApiClient: pooled session, bearer auth, error classes
  responses.py     → List response-shape normalization
  repositories.py  → StudentRepository / CourseRepository
  enrollment.py    → Enrollment reconciler (read-modify-write per student)
  dashboard.py     → Dashboard stats
  state.py         → ConsoleState (in-flight guard, view tokens)
  app.py           → RosterConsole (wires everything for the UI)
  runner.py        → main() for the command line
"""

from .app import RosterConsole

__all__ = ["RosterConsole"]
