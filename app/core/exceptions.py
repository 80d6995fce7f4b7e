"""
Error taxonomy for the mentorship services.

Services raise these; app.main turns them into JSON responses:
- InvalidInputError   -> 400 (missing/malformed field)
- NotFoundError       -> 404 (mentor, mentee or status does not exist)
- NoValidTargetsError -> 400 (every supplied mentee id was skipped)
- PersistenceError    -> 500 (store failure, detail hidden outside development)
"""


class MentorshipError(Exception):
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(MentorshipError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(MentorshipError):
    status_code = 404
    default_message = "Not found"


class NoValidTargetsError(MentorshipError):
    status_code = 400
    default_message = "No valid mentee IDs processed"


class PersistenceError(MentorshipError):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None, detail: str = None):
        super().__init__(message)
        # Internal reason; only surfaced in development
        self.detail = detail
