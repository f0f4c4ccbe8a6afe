class TaskBoardException(Exception):
    """Base exception for the task board API"""

    pass


class UnauthorizedException(TaskBoardException):
    """Raised when the bearer token is missing, invalid or expired"""

    pass


class NotFoundException(TaskBoardException):
    """Raised when resource not found or belongs to another tenant"""

    pass


class ForbiddenException(TaskBoardException):
    """Raised when an authenticated principal is not allowed to perform an action"""

    pass


class ValidationException(TaskBoardException):
    """Raised for business logic validation errors"""

    pass


class ConflictException(TaskBoardException):
    """Raised when a uniqueness rule would be violated (subdomain, email)"""

    pass
