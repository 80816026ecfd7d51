"""Unit tests for api/file.py: download, upload and file management calls."""

import io
import json
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest

from hidrive.api.errors import ServiceError
from hidrive.api.file import FileApi
from hidrive.api.params import ON_EXIST_AUTONAME, Parameters
from hidrive.transport import Request, Response

ENDPOINT = "https://api.example.test/2.1"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _response(status: int, payload: object | None = None, raw: bytes | None = None) -> Response:
    if raw is None:
        raw = json.dumps(payload).encode() if payload is not None else b""
    return Response(status, {}, io.BytesIO(raw))


def _file(path: str, size: int = 12) -> dict:  # type: ignore[type-arg]
    return {"path": path, "type": "file", "name": path.rsplit("/", 1)[-1], "size": size}


def _make_api(response: Response) -> tuple[FileApi, MagicMock]:
    """Return (api, mock_transport)."""
    transport = MagicMock()
    transport.execute.return_value = response
    return FileApi(transport, ENDPOINT), transport


def _request(transport: MagicMock) -> Request:
    return transport.execute.call_args.args[0]


def _query(request: Request) -> Parameters:
    return Parameters.from_query(urlsplit(request.url).query)


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------


class TestGet:
    def test_returns_streamable_response(self) -> None:
        api, transport = _make_api(_response(200, raw=b"0123456789"))

        with api.get(Parameters().set_path("/public/data.bin")) as response:
            assert response.read(4) == b"0123"
            assert response.read() == b"456789"

        request = _request(transport)
        assert request.method == "GET"
        assert request.body is None
        assert _query(request).get("path") == "/public/data.bin"

    def test_missing_file_raises_service_error(self) -> None:
        api, _ = _make_api(_response(404, {"code": "404", "msg": "Not Found"}))

        with pytest.raises(ServiceError) as exc_info:
            api.get(Parameters().set_path("/public/missing.bin"))

        assert exc_info.value.status_code == 404


# ---------------------------------------------------------------------------
# Upload and update
# ---------------------------------------------------------------------------


class TestUpload:
    def test_upload_streams_body_and_expects_201(self) -> None:
        api, transport = _make_api(_response(201, _file("/public/docs/a.txt")))
        content = io.BytesIO(b"hello world!")
        params = (
            Parameters().set_file_path("/public/docs/a.txt").set_on_exist(ON_EXIST_AUTONAME)
        )

        result = api.upload(params, content)

        assert result.is_file
        assert result.size == 12
        request = _request(transport)
        assert request.method == "POST"
        assert request.body is content
        assert urlsplit(request.url).path == "/2.1/file"
        assert dict(_query(request)) == {
            "dir": "/public/docs",
            "name": "a.txt",
            "on_exist": "autoname",
        }

    def test_upload_accepts_chunk_iterator(self) -> None:
        api, transport = _make_api(_response(201, _file("/public/big.bin")))
        chunks = iter([b"a" * 1024, b"b" * 1024])

        api.upload(Parameters().set_file_path("/public/big.bin"), chunks)

        assert _request(transport).body is chunks

    def test_upload_conflict_raises_service_error(self) -> None:
        api, _ = _make_api(_response(409, {"code": "409", "msg": "File exists"}))

        with pytest.raises(ServiceError):
            api.upload(Parameters().set_file_path("/public/a.txt"), b"data")

    def test_update_uses_put_and_expects_200(self) -> None:
        api, transport = _make_api(_response(200, _file("/public/a.txt", size=4)))

        result = api.update(Parameters().set_file_path("/public/a.txt"), b"data")

        assert result.size == 4
        assert _request(transport).method == "PUT"


# ---------------------------------------------------------------------------
# Delete, copy, move, rename
# ---------------------------------------------------------------------------


class TestFileManagement:
    def test_delete_returns_none(self) -> None:
        api, transport = _make_api(_response(204))

        assert api.delete(Parameters().set_path("/public/a.txt")) is None
        assert _request(transport).method == "DELETE"

    def test_copy_posts_to_copy_resource(self) -> None:
        api, transport = _make_api(_response(200, _file("/public/b.txt")))
        params = Parameters().set_src("/public/a.txt").set_dst("/public/b.txt")

        result = api.copy(params.set_preserve_mtime(True))

        assert result.path == "/public/b.txt"
        request = _request(transport)
        assert request.method == "POST"
        assert urlsplit(request.url).path == "/2.1/file/copy"
        assert _query(request).get("preserve_mtime") == "true"

    def test_move_posts_to_move_resource(self) -> None:
        api, transport = _make_api(_response(200, _file("/public/archive/a.txt")))

        api.move(Parameters().set_src("/public/a.txt").set_dst("/public/archive/a.txt"))

        assert urlsplit(_request(transport).url).path == "/2.1/file/move"

    def test_rename_expects_201(self) -> None:
        api, transport = _make_api(_response(201, _file("/public/b.txt")))

        result = api.rename(Parameters().set_path("/public/a.txt").set_name("b.txt"))

        assert result.name == "b.txt"
        assert urlsplit(_request(transport).url).path == "/2.1/file/rename"

    def test_rename_with_200_is_rejected(self) -> None:
        api, _ = _make_api(_response(200, {"code": "200", "msg": "OK"}))

        with pytest.raises(ServiceError):
            api.rename(Parameters().set_path("/public/a.txt").set_name("b.txt"))
