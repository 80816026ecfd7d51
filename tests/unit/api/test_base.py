"""Unit tests for api/base.py: request building, status validation and the call pipeline."""

import io
import json
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest

from hidrive.api.base import Api, validate
from hidrive.api.decoding import decode_storage_object
from hidrive.api.errors import DecodeError, PreconditionError, ServiceError
from hidrive.api.params import Parameters
from hidrive.config import HIDRIVE_API_V21
from hidrive.transport import Response

ENDPOINT = "https://api.example.test/2.1"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _response(status: int, payload: object | None = None, raw: bytes | None = None) -> Response:
    if raw is None:
        raw = json.dumps(payload).encode() if payload is not None else b""
    return Response(status, {}, io.BytesIO(raw))


def _make_api() -> tuple[Api, MagicMock]:
    """Return (api, mock_transport)."""
    transport = MagicMock()
    return Api(transport, ENDPOINT), transport


# ---------------------------------------------------------------------------
# Constructor tests
# ---------------------------------------------------------------------------


class TestApiInit:
    def test_empty_endpoint_selects_default(self) -> None:
        assert Api(MagicMock(), "").endpoint == HIDRIVE_API_V21

    def test_trailing_slash_is_dropped(self) -> None:
        assert Api(MagicMock(), ENDPOINT + "/").endpoint == ENDPOINT


# ---------------------------------------------------------------------------
# build_request tests
# ---------------------------------------------------------------------------


class TestBuildRequest:
    def test_joins_endpoint_and_resource_with_single_slash(self) -> None:
        api = Api(MagicMock(), ENDPOINT + "/")

        request = api.build_request("GET", "/dir")

        assert request.url == f"{ENDPOINT}/dir"

    def test_nested_resource_path(self) -> None:
        api, _ = _make_api()

        request = api.build_request("POST", "file/copy", Parameters().set_src("/a"))

        assert urlsplit(request.url).path == "/2.1/file/copy"

    def test_parameters_round_trip_through_query(self) -> None:
        api, _ = _make_api()
        params = (
            Parameters()
            .set_path("/public/ä ö/100%")
            .set_members(["dir", "file"])
            .add_recipient("a@example.com")
            .add_recipient("b@example.com")
        )

        request = api.build_request("GET", "dir", params)

        assert Parameters.from_query(urlsplit(request.url).query) == params

    def test_no_query_string_without_parameters(self) -> None:
        api, _ = _make_api()

        assert "?" not in api.build_request("GET", "dir", Parameters()).url
        assert "?" not in api.build_request("GET", "dir").url

    def test_method_is_normalised(self) -> None:
        api, _ = _make_api()

        assert api.build_request("patch", "meta").method == "PATCH"

    def test_body_is_attached_unchanged(self) -> None:
        api, _ = _make_api()
        stream = io.BytesIO(b"file content")

        request = api.build_request("POST", "file", Parameters().set_name("a.txt"), stream)

        assert request.body is stream
        assert request.headers["Content-Type"] == "application/octet-stream"

    def test_no_body_and_no_content_type_by_default(self) -> None:
        api, _ = _make_api()

        request = api.build_request("POST", "dir", Parameters().set_path("/public/x"))

        assert request.body is None
        assert "Content-Type" not in request.headers
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.parametrize("resource", ["", "/", "  "])
    def test_empty_resource_is_rejected(self, resource: str) -> None:
        api, transport = _make_api()

        with pytest.raises(PreconditionError):
            api.build_request("GET", resource)
        transport.execute.assert_not_called()

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_body_rejected_for_get_and_delete(self, method: str) -> None:
        api, _ = _make_api()

        with pytest.raises(PreconditionError):
            api.build_request(method, "file", body=b"data")

    def test_unsupported_method_is_rejected(self) -> None:
        api, _ = _make_api()

        with pytest.raises(PreconditionError):
            api.build_request("TRACE", "dir")


# ---------------------------------------------------------------------------
# validate tests
# ---------------------------------------------------------------------------


class TestValidate:
    def test_expected_status_passes_through_unread(self) -> None:
        stream = io.BytesIO(b'{"path": "/public"}')
        response = Response(200, {}, stream)

        result = validate(response, {200})

        assert result is response
        assert not stream.closed
        assert stream.tell() == 0

    def test_any_member_of_expected_set_passes(self) -> None:
        response = _response(207, {"done": []})

        assert validate(response, {200, 207}) is response

    def test_unexpected_status_raises_service_error(self) -> None:
        response = _response(404, {"code": "404", "msg": "Not Found"})

        with pytest.raises(ServiceError) as exc_info:
            validate(response, {200})

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "404"
        assert exc_info.value.message == "Not Found"

    def test_non_numeric_code_is_preserved(self) -> None:
        response = _response(400, {"code": "EINVAL", "msg": "invalid parameter"})

        with pytest.raises(ServiceError) as exc_info:
            validate(response, {201})

        assert exc_info.value.code == "EINVAL"

    def test_success_status_not_in_set_is_still_an_error(self) -> None:
        response = _response(200, {"code": "200", "msg": "OK"})

        with pytest.raises(ServiceError):
            validate(response, {201})

    def test_unparseable_error_body_raises_decode_error(self) -> None:
        response = _response(502, raw=b"<html>Bad Gateway</html>")

        with pytest.raises(DecodeError) as exc_info:
            validate(response, {200})

        assert not isinstance(exc_info.value, ServiceError)

    def test_error_response_is_closed(self) -> None:
        stream = io.BytesIO(b'{"code": "500", "msg": "Internal Error"}')

        with pytest.raises(ServiceError):
            validate(Response(500, {}, stream), {200})

        assert stream.closed


# ---------------------------------------------------------------------------
# call tests
# ---------------------------------------------------------------------------


class TestCall:
    def test_call_decodes_body(self) -> None:
        api, transport = _make_api()
        transport.execute.return_value = _response(200, {"path": "/public", "type": "dir"})
        params = Parameters().set_path("/public")

        result = api.call("GET", "dir", params, {200}, decode_storage_object)

        assert result.path == "/public"
        request = transport.execute.call_args.args[0]
        assert request.method == "GET"
        assert request.url == f"{ENDPOINT}/dir?path=%2Fpublic"

    def test_call_forwards_timeout(self) -> None:
        api, transport = _make_api()
        transport.execute.return_value = _response(200, {})

        api.call("GET", "dir", None, {200}, decode_storage_object, timeout=2.5)

        assert transport.execute.call_args.kwargs["timeout"] == 2.5

    def test_call_does_not_decode_on_error(self) -> None:
        api, transport = _make_api()
        transport.execute.return_value = _response(403, {"code": "403", "msg": "Forbidden"})
        decode = MagicMock()

        with pytest.raises(ServiceError):
            api.call("GET", "dir", None, {200}, decode)

        decode.assert_not_called()

    def test_transport_errors_propagate_unmodified(self) -> None:
        api, transport = _make_api()
        error = TimeoutError("timed out")
        transport.execute.side_effect = error

        with pytest.raises(TimeoutError) as exc_info:
            api.call("GET", "dir", None, {200}, decode_storage_object)

        assert exc_info.value is error

    def test_call_no_content_closes_response(self) -> None:
        api, transport = _make_api()
        stream = io.BytesIO(b"")
        transport.execute.return_value = Response(204, {}, stream)

        assert api.call_no_content("DELETE", "dir", Parameters().set_path("/x"), {204}) is None
        assert stream.closed

    def test_open_returns_unread_response(self) -> None:
        api, transport = _make_api()
        transport.execute.return_value = _response(200, raw=b"raw bytes")

        response = api.open("GET", "file", Parameters().set_path("/a.bin"), {200})

        assert response.read() == b"raw bytes"
