"""HTTP transport for HiDrive API requests with bearer-token authentication."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Any, Protocol, Union
from urllib import request as urllib_request
from urllib.error import HTTPError

from hidrive.api.errors import PreconditionError

if TYPE_CHECKING:
    from hidrive.config import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0

# Request body: in-memory bytes, a binary file object, or an iterable of chunks.
Body = Union[bytes, IO[bytes], Iterable[bytes]]

TokenSource = Union[str, Callable[[], str]]


@dataclass(frozen=True)
class Request:
    """A fully built HTTP request, ready to hand to a transport."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Body | None = None


class Response:
    """Status, headers and the still-open body stream of an HTTP response.

    The body is not read until asked for, so file downloads can be streamed.
    Close the response (or use it as a context manager) once done with it.
    """

    def __init__(self, status_code: int, headers: Mapping[str, str], stream: Any) -> None:
        self.status_code = status_code
        self.headers = headers
        self._stream = stream

    def read(self, size: int | None = None) -> bytes:
        """Read up to ``size`` bytes of the body, or the rest of it when ``size`` is None."""
        if size is None:
            return bytes(self._stream.read())
        return bytes(self._stream.read(size))

    def read_all(self) -> bytes:
        """Read the whole remaining body and close the response."""
        try:
            return self.read()
        finally:
            self.close()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> Response:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()


class Transport(Protocol):
    """Anything able to perform an authenticated HTTP request.

    Implementations return every HTTP reply, whatever its status, as a
    ``Response`` and only raise for transport-level failures.
    """

    def execute(self, request: Request, timeout: float | None = None) -> Response: ...


class UrllibTransport:
    """Transport built on ``urllib.request`` that attaches a bearer token.

    Token acquisition and refresh happen elsewhere; this class only asks its
    token source for the current access token before every request.
    """

    def __init__(
        self,
        access_token: TokenSource,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialise the transport.

        Args:
            access_token: OAuth2 access token, or a zero-argument callable
                returning the current one.
            timeout_seconds: Default socket timeout used when a call does not
                pass its own.
        """
        if not callable(access_token) and not access_token:
            raise PreconditionError("access_token: value should not be empty")
        self._access_token = access_token
        self._timeout_seconds = timeout_seconds

    def _token(self) -> str:
        token = self._access_token() if callable(self._access_token) else self._access_token
        if not token:
            raise PreconditionError("access_token: token source returned an empty token")
        return str(token)

    def execute(self, request: Request, timeout: float | None = None) -> Response:
        """Send ``request`` and return the response without checking its status.

        Raises:
            URLError: On DNS, TLS or connection failures (propagated unmodified).
            TimeoutError: When the socket times out.
        """
        headers = dict(request.headers)
        headers["Authorization"] = f"Bearer {self._token()}"
        req = urllib_request.Request(
            request.url,
            data=request.body,  # type: ignore[arg-type]
            headers=headers,
            method=request.method,
        )
        effective_timeout = self._timeout_seconds if timeout is None else timeout
        try:
            resp = urllib_request.urlopen(req, timeout=effective_timeout)
        except HTTPError as exc:
            # urllib raises for non-2xx; the reply itself is still a valid response.
            logger.debug(
                "[execute] received error status; method:%s;status:%d", request.method, exc.code
            )
            return Response(exc.code, exc.headers if exc.headers is not None else {}, exc)
        return Response(resp.status, resp.headers, resp)


def transport_from_config(config: ClientConfig) -> UrllibTransport:
    """Construct a UrllibTransport from client configuration.

    Args:
        config: Client configuration instance.

    Returns:
        Configured UrllibTransport instance.
    """
    return UrllibTransport(
        access_token=config.access_token,
        timeout_seconds=config.timeout_seconds,
    )
