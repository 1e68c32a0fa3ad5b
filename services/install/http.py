"""HTTP access with explicit, bounded redirect following."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin
from urllib.request import HTTPRedirectHandler, OpenerDirector, Request, build_opener

from services.install.constants import DEFAULT_HTTP_TIMEOUT, MAX_HTTP_REQUESTS, USER_AGENT
from services.install.models import RedirectLimitError, ResolutionError


_LOGGER = logging.getLogger(__name__)

__all__ = [
    "HttpResolver",
    "HttpResponse",
    "ResponseKind",
    "Transport",
    "UrllibTransport",
]


class ResponseKind(str, Enum):
    """Closed classification of a single HTTP exchange."""

    OK = "ok"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class HttpResponse:
    """A fully read response; ``status`` is ``0`` when no response arrived."""

    url: str
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def kind(self) -> ResponseKind:
        if self.status == 0:
            return ResponseKind.UNREACHABLE
        if self.status == 200:
            return ResponseKind.OK
        if 300 <= self.status < 400:
            return ResponseKind.REDIRECT
        if self.status == 404:
            return ResponseKind.NOT_FOUND
        return ResponseKind.UNEXPECTED

    @property
    def location(self) -> str | None:
        for name, value in self.headers.items():
            if name.lower() == "location":
                return value
        return None

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


class Transport(Protocol):
    """Issue one GET without following redirects."""

    def send(self, url: str) -> HttpResponse:
        """Return the response for ``url``; never raise for HTTP statuses."""


class _NoRedirectHandler(HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[override]
        return None


class UrllibTransport:
    """:class:`Transport` backed by ``urllib`` with redirects disabled."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT, opener: OpenerDirector | None = None) -> None:
        self._timeout = timeout
        self._opener = opener or build_opener(_NoRedirectHandler())

    def send(self, url: str) -> HttpResponse:
        request = Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with self._opener.open(request, timeout=self._timeout) as response:  # nosec - HTTPS release host
                return HttpResponse(
                    url=url,
                    status=response.status,
                    headers=dict(response.headers.items()),
                    body=response.read(),
                )
        except HTTPError as exc:
            # Redirects and error statuses both arrive here once redirects are disabled.
            try:
                body = exc.read()
            except OSError:
                body = b""
            finally:
                exc.close()
            headers = dict(exc.headers.items()) if exc.headers is not None else {}
            return HttpResponse(url=url, status=exc.code, headers=headers, body=body)
        except (URLError, OSError) as exc:
            _LOGGER.debug("Request to %s failed: %s", url, exc)
            return HttpResponse(url=url, status=0)


class HttpResolver:
    """Follow redirects by hand, giving up after a fixed number of requests."""

    def __init__(self, transport: Transport, *, max_requests: int = MAX_HTTP_REQUESTS) -> None:
        self._transport = transport
        self._max_requests = max_requests

    def follow(self, url: str) -> HttpResponse:
        current = url
        for attempt in range(1, self._max_requests + 1):
            response = self._transport.send(current)
            kind = response.kind
            if kind is ResponseKind.OK:
                _LOGGER.debug("Resolved %s to %s after %s request(s)", url, current, attempt)
                return response
            if kind is ResponseKind.REDIRECT:
                location = response.location
                if not location:
                    raise ResolutionError(f"Redirect from {current} did not include a Location header")
                current = urljoin(current, location)
                _LOGGER.debug("Redirected (%s) to %s", response.status, current)
            elif kind is ResponseKind.NOT_FOUND:
                _LOGGER.debug("%s is not available yet (404), retrying", current)
            elif kind is ResponseKind.UNREACHABLE:
                _LOGGER.debug("%s is unreachable, retrying", current)
            else:
                _LOGGER.debug("Unexpected status %s from %s, retrying", response.status, current)
        raise RedirectLimitError(f"Could not resolve URL {url} within {self._max_requests} requests")
