class FileHostException(Exception):
    """Base exception for the application"""
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class ValidationError(FileHostException):
    """Malformed or out-of-range input"""
    status_code = 400


class AuthenticationError(FileHostException):
    """Missing or invalid credentials"""
    status_code = 401


class AuthorizationError(FileHostException):
    """Authenticated but not allowed"""
    status_code = 403


class NotFoundError(FileHostException):
    """Resource not found errors"""
    status_code = 404


class ConflictError(FileHostException):
    """Resource conflict errors"""
    status_code = 400


class FileOperationError(FileHostException):
    """File operation related errors"""
    status_code = 500
