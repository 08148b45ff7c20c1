"""Exception hierarchy for the receiver."""


class ReceiverError(Exception):
    """Base exception for all receiver errors."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message or "Receiver operation failed"
        super().__init__(self.message)


class ConfigError(ReceiverError):
    """Configuration could not be read or failed validation."""

    def __init__(self, message: str | None = None, path: str | None = None) -> None:
        self.path = path
        super().__init__(message or "Invalid configuration")


class TemplateError(ConfigError):
    """Message template failed to parse."""

    def __init__(self, message: str | None = None, lineno: int | None = None) -> None:
        self.lineno = lineno
        super().__init__(message or "Invalid message template")


class MatrixError(ReceiverError):
    """A call to the Matrix homeserver failed."""

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        errcode: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.errcode = errcode
        super().__init__(message or "Matrix request failed")


class AuthError(ReceiverError):
    """Could not authenticate against the homeserver."""

    def __init__(self, homeserver: str, user_id: str, reason: str | None = None) -> None:
        self.homeserver = homeserver
        self.user_id = user_id
        message = f"Could not log in to Matrix homeserver {homeserver} as {user_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RoomAccessError(ReceiverError):
    """Could not verify or obtain membership of the target room."""

    def __init__(self, room_id: str, reason: str | None = None) -> None:
        self.room_id = room_id
        message = f"Could not access room {room_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DeliveryError(ReceiverError):
    """A rendered message could not be sent to the room."""

    def __init__(self, room_id: str, body: str, reason: str | None = None) -> None:
        self.room_id = room_id
        self.body = body
        message = f"Could not forward message to {room_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
