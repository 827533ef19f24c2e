"""Header and response classification policies for each variant."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

import httpx

from .errors import ContentTypeError, RequestError
from .models import HttpMethod, ResourceSpec, Variant

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"

_TEXT_CONTENT_TYPES = (
    re.compile(r"^text/.+"),
    re.compile(r"^application/json$"),
    re.compile(r"^application/samlmetadata\+xml$"),
)


def is_text_content_type(content_type: str) -> bool:
    """Return True if the media type (parameters ignored) is textual."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    return any(pattern.match(media_type) for pattern in _TEXT_CONTENT_TYPES)


def fold_headers(headers: httpx.Headers) -> dict[str, str]:
    """Collapse repeated header values into a single comma-joined string."""
    return {name: ", ".join(headers.get_list(name)) for name in headers.keys()}


class Policy(ABC):
    """How requests are decorated and responses are judged."""

    variant: Variant
    sensitive: bool

    @abstractmethod
    def request_headers(self, spec: ResourceSpec) -> httpx.Headers:
        """Build outgoing headers from the declared attributes."""

    def is_absent(self, method: HttpMethod, response: httpx.Response) -> bool:
        """Return True if the response means the remote object is gone."""
        return False

    @abstractmethod
    def check(self, method: HttpMethod, response: httpx.Response) -> None:
        """Raise a classified error if the response is not a success."""

    def captured_headers(self, response: httpx.Response) -> dict[str, str] | None:
        """Headers to record on success, or None to leave state untouched."""
        return None


class LegacyPolicy(Policy):
    """Default JSON content type, tolerant of 201 and of 404 on GET/DELETE."""

    variant = Variant.LEGACY
    sensitive = True

    accepted = frozenset({200, 201})

    def request_headers(self, spec: ResourceSpec) -> httpx.Headers:
        headers = httpx.Headers({"Content-Type": DEFAULT_CONTENT_TYPE})
        headers.update(spec.request_headers)
        return headers

    def is_absent(self, method: HttpMethod, response: httpx.Response) -> bool:
        return method in (HttpMethod.GET, HttpMethod.DELETE) and response.status_code == 404

    def check(self, method: HttpMethod, response: httpx.Response) -> None:
        if response.status_code not in self.accepted:
            raise RequestError(response.status_code, method, response.text)


class NegotiatedPolicy(Policy):
    """Caller headers only, strict 200 with a textual content type."""

    variant = Variant.NEGOTIATED
    sensitive = False

    def request_headers(self, spec: ResourceSpec) -> httpx.Headers:
        return httpx.Headers(spec.request_headers)

    def check(self, method: HttpMethod, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise RequestError(response.status_code, method)

        content_type = response.headers.get("Content-Type")
        if not content_type or not is_text_content_type(content_type):
            raise ContentTypeError(content_type)

    def captured_headers(self, response: httpx.Response) -> dict[str, str] | None:
        return fold_headers(response.headers)


_POLICIES: dict[Variant, Policy] = {
    Variant.LEGACY: LegacyPolicy(),
    Variant.NEGOTIATED: NegotiatedPolicy(),
}


def get_policy(variant: Variant | str) -> Policy:
    """Look up the policy for a variant name."""
    try:
        return _POLICIES[Variant(variant)]
    except ValueError:
        raise ValueError(f"Unknown variant: '{variant}'") from None
