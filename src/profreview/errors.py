"""Error taxonomy for the review pipeline and the streaming chat protocol."""


class ProfReviewError(Exception):
    """Base class for all profreview errors."""


class GenerationUnavailable(ProfReviewError):
    """The underlying model call failed (transport or provider fault)."""


class SchemaViolation(ProfReviewError):
    """Generated content does not conform to the critique schema."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class TransportFailure(ProfReviewError):
    """The connection failed while a response was being streamed."""


class APIRequestError(ProfReviewError):
    """An HTTP endpoint returned a non-success or unusable response."""

    endpoint = "API"

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        detail = body if body else "empty response body"
        super().__init__(f"{self.endpoint} error: {status_code} {detail}")


class ReviewRequestError(APIRequestError):
    """The batch review endpoint returned a non-success or empty response."""

    endpoint = "Review API"


class ChatRequestError(APIRequestError):
    """The chat endpoint refused the request before streaming started."""

    endpoint = "Chat API"


class MessageFinalizedError(ProfReviewError):
    """Content was appended to a chat message that is no longer streaming."""
