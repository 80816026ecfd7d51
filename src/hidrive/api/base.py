"""Request/response pipeline shared by every HiDrive resource API.

A resource operation builds a request for its resource path, hands it to the
transport, validates the status against the codes that operation accepts,
and decodes the body. ``Api.call`` runs that pipeline with the pieces that
vary (method, resource path, expected statuses, decoder) passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from typing import TypeVar

from hidrive.api.decoding import decode_service_error
from hidrive.api.errors import PreconditionError
from hidrive.api.params import Parameters
from hidrive.config import HIDRIVE_API_V21
from hidrive.transport import Body, Request, Response, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

METHODS_WITHOUT_BODY = frozenset({"GET", "DELETE"})
METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})

# Expected success codes per operation class
STATUS_OK = frozenset({200})
STATUS_CREATED = frozenset({201})
STATUS_NO_CONTENT = frozenset({204})
STATUS_OK_OR_NO_CONTENT = frozenset({200, 204})
STATUS_OK_OR_MULTI_STATUS = frozenset({200, 207})


def validate(response: Response, expected: Collection[int]) -> Response:
    """Return ``response`` unchanged when its status is one of ``expected``.

    Otherwise the whole body is read, the response is closed and the
    ``{code, msg}`` error envelope is raised as a ServiceError.

    Args:
        response: Response returned by the transport.
        expected: Status codes the calling operation accepts as success.

    Returns:
        The same response, still unread.

    Raises:
        ServiceError: If the status is unexpected and the body is a valid error object.
        DecodeError: If the status is unexpected and the body cannot be decoded.
    """
    if response.status_code in expected:
        return response
    body = response.read_all()
    raise decode_service_error(response.status_code, body)


class Api:
    """Endpoint and transport shared by the resource APIs.

    Both are fixed at construction; every call builds its own request, so a
    single instance can be used from several threads at once.
    """

    def __init__(self, transport: Transport, endpoint: str = HIDRIVE_API_V21) -> None:
        """Initialise the API.

        Args:
            transport: Authenticated transport used to send requests.
            endpoint: HiDrive API base URL. An empty value selects the
                default Strato endpoint.
        """
        endpoint = (endpoint or "").strip() or HIDRIVE_API_V21
        self._endpoint = endpoint.rstrip("/")
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def transport(self) -> Transport:
        return self._transport

    def build_request(
        self,
        method: str,
        resource: str,
        params: Parameters | None = None,
        body: Body | None = None,
    ) -> Request:
        """Compose an HTTP request for ``resource`` under the configured endpoint.

        The resource path is joined to the endpoint with a single ``/`` and
        the parameters become the percent-encoded query string. A body is
        attached as-is, so file objects and chunk iterators are streamed by
        the transport rather than loaded into memory.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH or DELETE).
            resource: Resource path such as "dir" or "file/copy".
            params: Query parameters; None for no query string.
            body: Optional raw request body for POST, PUT and PATCH.

        Returns:
            The built Request. No network I/O happens here.

        Raises:
            PreconditionError: If the resource path is empty, the method is
                unsupported, or a body is given for GET or DELETE.
        """
        method = (method or "").strip().upper()
        if method not in METHODS_WITHOUT_BODY | METHODS_WITH_BODY:
            raise PreconditionError(f"method: unsupported HTTP method {method!r}")
        path = (resource or "").strip().strip("/")
        if not path:
            raise PreconditionError("resource: value should not be empty")
        if body is not None and method in METHODS_WITHOUT_BODY:
            raise PreconditionError(f"body: {method} requests cannot carry a body")

        url = f"{self._endpoint}/{path}"
        query = params.to_query() if params else ""
        if query:
            url = f"{url}?{query}"

        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/octet-stream"
        return Request(method=method, url=url, headers=headers, body=body)

    def execute(self, request: Request, timeout: float | None = None) -> Response:
        """Send ``request`` through the transport; transport errors propagate unmodified."""
        # Query strings may carry share passwords; log the bare URL only.
        url = request.url.partition("?")[0]
        logger.debug("[execute] sending request; method:%s;url:%s", request.method, url)
        return self._transport.execute(request, timeout=timeout)

    def open(
        self,
        method: str,
        resource: str,
        params: Parameters | None,
        expected: Collection[int],
        *,
        body: Body | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Build, send and validate a request, returning the unread response."""
        request = self.build_request(method, resource, params, body)
        return validate(self.execute(request, timeout=timeout), expected)

    def call(
        self,
        method: str,
        resource: str,
        params: Parameters | None,
        expected: Collection[int],
        decode: Callable[[bytes], T],
        *,
        body: Body | None = None,
        timeout: float | None = None,
    ) -> T:
        """Run the full pipeline and decode the response body.

        Args:
            method: HTTP method.
            resource: Resource path.
            params: Query parameters.
            expected: Status codes accepted as success for this operation.
            decode: Function turning the raw body into the result type.
            body: Optional raw request body.
            timeout: Per-call deadline forwarded to the transport.

        Returns:
            Whatever ``decode`` returns.
        """
        response = self.open(method, resource, params, expected, body=body, timeout=timeout)
        return decode(response.read_all())

    def call_no_content(
        self,
        method: str,
        resource: str,
        params: Parameters | None,
        expected: Collection[int],
        *,
        timeout: float | None = None,
    ) -> None:
        """Run the pipeline for operations whose success reply has no body."""
        response = self.open(method, resource, params, expected, timeout=timeout)
        response.close()
