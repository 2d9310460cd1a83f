"""
Storefront Client Error Handling

Defines the error taxonomy raised by the HTTP gateway and converted into
user-visible messages at service call sites.
"""

from typing import Optional, Any, Dict
from enum import IntEnum


GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class ErrorCode(IntEnum):
    """Client error codes"""

    # Local failures, no backend contact
    VALIDATION_ERROR = 1001        # Local precondition failed

    # Authorization failures
    AUTH_EXPIRED = 1101            # 401 on a request, handled by refresh-and-retry
    AUTH_INVALID = 1102            # Refresh call itself failed

    # Backend responses
    NOT_FOUND = 1201               # 404 from the backend
    SERVER_ERROR = 1202            # Any other unsuccessful response

    # Transport
    NETWORK_ERROR = 1301           # Connection, DNS, timeout


class StorefrontError(Exception):
    """Base class for all storefront client errors"""

    def __init__(
        self,
        code: int,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        """
        Initialize storefront error

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            data: Optional additional error data
            status_code: HTTP status of the response, when there was one
        """
        self.code = code
        self.message = message
        self.data = data or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a serializable dict"""
        error_dict = {
            "code": int(self.code),
            "type": type(self).__name__,
            "message": self.message
        }
        if self.status_code is not None:
            error_dict["status"] = self.status_code
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class ValidationError(StorefrontError):
    """Local precondition failure, reported without contacting the backend"""

    def __init__(self, message: str = "Invalid input", data: Optional[Dict] = None):
        super().__init__(ErrorCode.VALIDATION_ERROR, message, data)


class AuthExpired(StorefrontError):
    """Authorization failure (401) that could not be recovered by a refresh"""

    def __init__(self, message: str = "Your session has expired", data: Optional[Dict] = None):
        super().__init__(ErrorCode.AUTH_EXPIRED, message, data, status_code=401)


class AuthInvalid(StorefrontError):
    """The refresh call failed; the session has been cleared"""

    def __init__(self, message: str = "Please log in again", data: Optional[Dict] = None):
        super().__init__(ErrorCode.AUTH_INVALID, message, data)


class NotFound(StorefrontError):
    """Requested resource doesn't exist"""

    def __init__(self, message: str = "Not found", data: Optional[Dict] = None):
        super().__init__(ErrorCode.NOT_FOUND, message, data, status_code=404)


class ServerError(StorefrontError):
    """Any other unsuccessful backend response"""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: Optional[int] = None,
                 data: Optional[Dict] = None):
        super().__init__(ErrorCode.SERVER_ERROR, message, data, status_code=status_code)


class NetworkError(StorefrontError):
    """Transport failure"""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE, data: Optional[Dict] = None):
        super().__init__(ErrorCode.NETWORK_ERROR, message, data)


class ErrorHandler:
    """Utility class for turning errors into user-visible messages"""

    @staticmethod
    def user_message(e: Exception, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
        """
        Convert any exception to a message that can be shown to the user

        Backend messages are preferred. Transport failures get the generic
        fallback and unexpected exceptions never leak their text.

        Args:
            e: Exception to convert
            fallback: Message used when the error carries none

        Returns:
            Message string
        """
        if isinstance(e, NetworkError):
            return fallback
        if isinstance(e, StorefrontError) and e.message and e.message != GENERIC_ERROR_MESSAGE:
            return e.message
        return fallback

    @staticmethod
    def message_from_body(body: Any) -> Optional[str]:
        """
        Extract the backend message from a response body

        Args:
            body: Parsed JSON body (may be anything)

        Returns:
            Non-empty message string or None
        """
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
            if isinstance(message, str) and message.strip():
                return message
        return None
