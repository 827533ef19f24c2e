"""Error taxonomy for lifecycle dispatch."""

from __future__ import annotations


class HttpResourceError(Exception):
    """Base class for all lifecycle dispatch failures."""


class TransportError(HttpResourceError):
    """The request could not be sent or the response could not be received."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        self.method = method
        self.url = url
        super().__init__(f"HTTP transport error. Method: {method}. Reason: {reason}")


class RequestError(HttpResourceError):
    """The response status code is outside the accepted set."""

    def __init__(self, status_code: int, method: str, body: str | None = None) -> None:
        self.status_code = status_code
        self.method = method
        self.body = body
        message = f"HTTP request error. Response code: {status_code}. Method: {method}."
        if body is not None:
            message += f" Body: {body}"
        super().__init__(message)


class ContentTypeError(HttpResourceError):
    """The response content type is missing or not textual."""

    def __init__(self, content_type: str | None) -> None:
        self.content_type = content_type
        if content_type:
            message = f"Content-Type is not recognized as a text type, got '{content_type}'"
        else:
            message = "Content-Type header is missing from the response"
        super().__init__(message)


class IdentityMissingError(HttpResourceError):
    """A create or read response carried no identifier."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(
            f"{method} endpoint did not return the unique id for the http_resource"
        )
