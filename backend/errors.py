# errors.py - Domain errors raised by the service layer
# Routers never catch these; main.py maps them onto HTTP responses.


class TaskDeskError(Exception):
    """Base class for client-facing domain errors"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskDeskError):
    """Client-correctable request: bad role combination, duplicate key, etc."""

    status_code = 400


class NotFoundError(TaskDeskError):
    """A referenced entity id does not exist"""

    status_code = 404
