"""Custom exceptions for the application."""


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class BadRequestException(AppException):
    """Raised when the request is missing data or carries malformed data."""
    def __init__(self, message: str = "Bad Request"):
        super().__init__(message, status_code=400)


class MissingFieldsException(BadRequestException):
    """Raised when mandatory body fields are absent."""
    def __init__(self, fields: list[str] | None = None):
        message = "Missing required fields"
        if fields:
            message = f"{message} ({', '.join(fields)})"
        super().__init__(message)
        self.fields = fields or []


class InvalidEmailFormatException(BadRequestException):
    """Raised when an email address fails syntax validation."""
    def __init__(self, message: str = "Invalid email format"):
        super().__init__(message)


class NoFileProvidedException(BadRequestException):
    """Raised when a multipart upload carries no file."""
    def __init__(self, message: str = "No file was provided"):
        super().__init__(message)


class UnreadableFileException(BadRequestException):
    """Raised when an uploaded file cannot be decoded or parsed."""
    def __init__(self, message: str = "The file could not be read"):
        super().__init__(message)


class InvalidNameException(BadRequestException):
    """Raised when a file name is empty after trimming."""
    def __init__(self, message: str = "Invalid name"):
        super().__init__(message)


class UnauthorizedException(AppException):
    """Raised when authentication fails."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class InvalidCredentialsException(UnauthorizedException):
    """Raised when login email or password do not match.

    The message is the same for both cases so callers cannot tell which
    one was wrong.
    """
    def __init__(self):
        super().__init__("Invalid credentials")


class TokenExpiredException(UnauthorizedException):
    """Raised when token has expired."""
    def __init__(self):
        super().__init__("Token expired")


class InvalidTokenException(UnauthorizedException):
    """Raised when token is invalid."""
    def __init__(self):
        super().__init__("Invalid token")


class NotFoundException(AppException):
    """Raised when resource is not found."""
    def __init__(self, message: str = "Not Found"):
        super().__init__(message, status_code=404)


class ProjectNotFoundException(NotFoundException):
    """Raised when the referenced project does not exist."""
    def __init__(self, message: str = "Project not found"):
        super().__init__(message)


class ConflictException(AppException):
    """Raised when a write would break a uniqueness rule."""
    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)


class DuplicateEmailException(ConflictException):
    def __init__(self, message: str = "Email is already in use"):
        super().__init__(message)


class DuplicateUsernameException(ConflictException):
    def __init__(self, message: str = "Username is already in use"):
        super().__init__(message)


class DuplicateNameException(ConflictException):
    def __init__(self, message: str = "Another client already uses this name"):
        super().__init__(message)


class DuplicateCifException(ConflictException):
    def __init__(self, message: str = "Another client already uses this CIF"):
        super().__init__(message)


class ValidationException(AppException):
    """Raised when validation fails."""
    def __init__(self, message: str = "Validation Error"):
        super().__init__(message, status_code=422)


class UnexpectedPersistenceFailureException(AppException):
    """Raised when the persistence layer fails in an unexpected way."""
    def __init__(self, message: str = "Unexpected persistence failure"):
        super().__init__(message, status_code=500)


class ServiceUnavailableException(AppException):
    """Raised when service is temporarily unavailable (e.g., database connection failure)."""
    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, status_code=503)
