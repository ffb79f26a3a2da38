"""
Classified failures raised by the console core.

  ValidationError      → rejected locally, never reaches the network
  ApiError             → non-2xx from the remote API
    RateLimited        → HTTP 429 (recoverable by waiting)
  TransportError       → network failure or unparseable response
  NotFoundLocal        → entity absent after a fetch
  OperationInProgress  → the same action is already in flight
"""


class RosterError(Exception):
    """Base for every classified console failure."""

    # Set by the enrollment reconciler when a bulk operation aborts part-way.
    failed_student_id = None
    applied_student_ids = ()


class ValidationError(RosterError):
    def __init__(self, errors):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(summary or "Invalid input")


class ApiError(RosterError):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class RateLimited(ApiError):
    def __init__(self, message="API Error: 429 Too Many Requests - Please try again later"):
        super().__init__(message, status_code=429)


class TransportError(RosterError):
    pass


class NotFoundLocal(RosterError):
    pass


class OperationInProgress(RosterError):
    pass
