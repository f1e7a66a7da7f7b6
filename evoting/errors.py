# evoting/errors.py
# Domain errors raised by the stores and workflows, mapped to HTTP in main.py


class VotingAppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VotingAppError):
    status_code = 400


class ConflictError(VotingAppError):
    status_code = 409


class RegistrationConflict(ConflictError):
    # signup reports uniqueness problems as plain bad requests
    status_code = 400


class UnauthorizedError(VotingAppError):
    status_code = 401


class ForbiddenError(VotingAppError):
    status_code = 403


class NotFoundError(VotingAppError):
    status_code = 404


class TransientError(VotingAppError):
    status_code = 503


class InvalidTokenError(Exception):
    """Token could not be verified (bad signature, expired or malformed)."""
