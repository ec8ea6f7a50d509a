"""Errors raised while turning a meal photo into food items."""

GENERIC_FAILURE_MESSAGE = "Failed to analyze image. Please try again."
NO_FOOD_MESSAGE = "Unable to detect food items. Please try another image."


class RecognitionError(Exception):
    """Base class for failed recognitions; the ledger is never mutated."""

    user_message: str = GENERIC_FAILURE_MESSAGE


class MalformedResponseError(RecognitionError):
    """Recognition output could not be parsed or lacks required fields."""


class NoFoodDetectedError(RecognitionError):
    """Recognition service explicitly reported that no food was found."""

    def __init__(self, message: str = NO_FOOD_MESSAGE) -> None:
        super().__init__(message)
        self.user_message = message


class TransportError(RecognitionError):
    """Recognition call failed or timed out before returning a payload."""
