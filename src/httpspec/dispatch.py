"""Resource lifecycle dispatcher: one HTTP call per lifecycle operation."""

from __future__ import annotations

import logging

import httpx

from .errors import IdentityMissingError, TransportError
from .models import HttpMethod, ResourceSpec, ResourceState, Variant
from .policy import Policy, get_policy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_IDENTITY_METHODS = frozenset({HttpMethod.GET, HttpMethod.POST})


class Dispatcher:
    """Build, send and classify lifecycle requests under a single policy."""

    def __init__(
        self,
        variant: Variant | str = Variant.LEGACY,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.policy: Policy = get_policy(variant)
        self.timeout = timeout

    @property
    def variant(self) -> Variant:
        return self.policy.variant

    def _send(self, spec: ResourceSpec, method: HttpMethod) -> httpx.Response:
        """Send the request and return the fully read response."""
        try:
            headers = self.policy.request_headers(spec)
            with httpx.Client(timeout=self.timeout) as client:
                return client.request(
                    method.value,
                    spec.url,
                    headers=headers,
                    content=spec.body.encode(),
                )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TransportError(method, spec.url, self._reason(exc)) from exc

    def _reason(self, exc: Exception) -> str:
        # httpx messages may echo the URL or header values
        if self.policy.sensitive or not str(exc):
            return type(exc).__name__
        return str(exc)

    def dispatch(self, spec: ResourceSpec, method: HttpMethod | str, state: ResourceState) -> None:
        """Perform one lifecycle call, updating state or raising a classified error."""
        method = HttpMethod(method)
        response = self._send(spec, method)
        logger.debug("%s returned %d (%s)", method, response.status_code, self.variant)

        if self.policy.is_absent(method, response):
            logger.warning("%s returned 404; treating resource as absent", method)
            state.id = ""
            return

        self.policy.check(method, response)

        if method in _IDENTITY_METHODS:
            identity = response.text
            if not identity:
                raise IdentityMissingError(method)
            state.id = identity

        captured = self.policy.captured_headers(response)
        if captured is not None:
            state.response_headers = captured

    def create(self, spec: ResourceSpec, state: ResourceState) -> None:
        self.dispatch(spec, HttpMethod.POST, state)

    def read(self, spec: ResourceSpec, state: ResourceState) -> None:
        self.dispatch(spec, HttpMethod.GET, state)

    def update(self, spec: ResourceSpec, state: ResourceState) -> None:
        self.dispatch(spec, HttpMethod.PUT, state)

    def delete(self, spec: ResourceSpec, state: ResourceState) -> None:
        self.dispatch(spec, HttpMethod.DELETE, state)
        state.id = ""
