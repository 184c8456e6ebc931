from typing import Any, Optional


class PlateCoachError(Exception):
    """Base for failures that map onto an HTTP error response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NoImageProvided(PlateCoachError):
    status_code = 400
    message = "No image uploaded"


class ImageTooLarge(PlateCoachError):
    status_code = 413
    message = "Image too large"


class ModelUnavailable(PlateCoachError):
    """The vision provider could not produce a reply."""

    status_code = 500
    message = "Failed to analyze image"


class InvalidFormat(PlateCoachError):
    """The model replied, but not with the structured analysis we asked for."""

    status_code = 500
    message = "Invalid response format from AI"


class MissingRequiredField(PlateCoachError):
    status_code = 400
    message = "sugar, carbs, cal is required"


class InvalidNumericField(PlateCoachError):
    status_code = 400
    message = "sugar, carbs, cal must be non-negative numbers"


class MissingUserId(PlateCoachError):
    status_code = 400
    message = "no userId received!"


class StoreFailure(PlateCoachError):
    status_code = 500
    message = "Database operation failed"


__all__ = [
    "PlateCoachError",
    "NoImageProvided",
    "ImageTooLarge",
    "ModelUnavailable",
    "InvalidFormat",
    "MissingRequiredField",
    "InvalidNumericField",
    "MissingUserId",
    "StoreFailure",
]
