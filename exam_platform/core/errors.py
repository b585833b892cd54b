"""
Error taxonomy for rejected calls

A rejected call never leaves partial state behind; callers decide whether to retry.
"""


class ExamPlatformError(Exception):
    """Base class for every rejection raised by the stores"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(ExamPlatformError):
    """Wrong role, not the owner, or not enrolled"""
    status_code = 403


class NotFoundError(ExamPlatformError):
    """Unknown or inactive course/exam (the two are indistinguishable)"""
    status_code = 404


class ValidationError(ExamPlatformError):
    """Empty text, mismatched lengths, out-of-range index, zero questions"""
    status_code = 422


class StateConflictError(ExamPlatformError):
    """Duplicate registration or duplicate enrollment"""
    status_code = 409
