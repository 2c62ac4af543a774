from fastapi import HTTPException, status


class AppError(HTTPException):
    """Expected, caller-recoverable failure with a fixed status and message."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.detail)


class DuplicateUsername(AppError):
    detail = "Username already exists"


class DuplicateEmail(AppError):
    detail = "Email already exists"


class DuplicateSubdomain(AppError):
    detail = "Subdomain already exists"


class SubdomainInvalid(AppError):
    detail = "Subdomain is invalid"

    def __init__(self, reason: str | None = None, detail: str | None = None):
        self.reason = reason
        super().__init__(detail)


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid username or password"


class AuthenticationRequired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication required"


class UserNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found"


class EmailAlreadyLinked(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Email already associated with another account"


class UniquenessConflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Account could not be created, please retry"


class ContentNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Content item not found"


class ContentAccessDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Unauthorized access to content"


class ContentGenerationFailed(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Failed to generate content"
