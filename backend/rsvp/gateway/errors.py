"""Gateway error types."""


class GatewayError(Exception):
    """A request to the data gateway failed; ``message`` is safe to show users."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ReferenceViolationError(GatewayError):
    """Raised when an attendee insert names an event that does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} does not exist")
        self.event_id = event_id


class InvalidCreationPasswordError(GatewayError):
    """Raised when an event insert carries the wrong creation password."""

    def __init__(self) -> None:
        super().__init__("Invalid event creation password")
