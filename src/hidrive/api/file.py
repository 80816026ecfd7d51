"""Operations on the HiDrive ``/file`` resource."""

from __future__ import annotations

from hidrive.api.base import STATUS_CREATED, STATUS_NO_CONTENT, STATUS_OK, Api
from hidrive.api.decoding import decode_storage_object
from hidrive.api.models import StorageObject
from hidrive.api.params import Parameters
from hidrive.transport import Body, Response

RESOURCE_FILE = "file"
RESOURCE_FILE_COPY = "file/copy"
RESOURCE_FILE_MOVE = "file/move"
RESOURCE_FILE_RENAME = "file/rename"


class FileApi(Api):
    """File operations: download, upload, overwrite, delete, copy, move, rename."""

    def get(self, params: Parameters, *, timeout: float | None = None) -> Response:
        """Open a file for download.

        The returned response holds the unread body; read it in chunks and
        close it when done (it is also a context manager).

        Supported parameters: path, pid.
        """
        return self.open("GET", RESOURCE_FILE, params, STATUS_OK, timeout=timeout)

    def upload(
        self, params: Parameters, content: Body, *, timeout: float | None = None
    ) -> StorageObject:
        """Create a new file from ``content`` without overwriting an existing one.

        ``content`` is sent as-is: pass an open binary file or an iterator of
        chunks to stream large uploads. The API limits the body to 2 GiB.
        Because existence is only checked after the upload completes, set
        ``on_exist=autoname`` to keep the content if the name got taken
        meanwhile.

        Supported parameters: dir, dir_id, name, on_exist, mtime, parent_mtime.
        """
        return self.call(
            "POST",
            RESOURCE_FILE,
            params,
            STATUS_CREATED,
            decode_storage_object,
            body=content,
            timeout=timeout,
        )

    def update(
        self, params: Parameters, content: Body, *, timeout: float | None = None
    ) -> StorageObject:
        """Overwrite a file with ``content``, creating it if it does not exist.

        Supported parameters: dir, dir_id, name, mtime, parent_mtime.
        """
        return self.call(
            "PUT",
            RESOURCE_FILE,
            params,
            STATUS_OK,
            decode_storage_object,
            body=content,
            timeout=timeout,
        )

    def delete(self, params: Parameters, *, timeout: float | None = None) -> None:
        """Delete a file.

        Supported parameters: path, pid, parent_mtime.
        """
        self.call_no_content("DELETE", RESOURCE_FILE, params, STATUS_NO_CONTENT, timeout=timeout)

    def copy(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Copy a file.

        Supported parameters: src, src_id, dst, dst_id, on_exist,
        dst_parent_mtime, preserve_mtime.
        """
        return self.call(
            "POST", RESOURCE_FILE_COPY, params, STATUS_OK, decode_storage_object, timeout=timeout
        )

    def move(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Move a file.

        Supported parameters: src, src_id, dst, dst_id, on_exist,
        src_parent_mtime, dst_parent_mtime.
        """
        return self.call(
            "POST", RESOURCE_FILE_MOVE, params, STATUS_OK, decode_storage_object, timeout=timeout
        )

    def rename(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Rename a file in place.

        Supported parameters: path, pid, name, on_exist, parent_mtime.
        """
        return self.call(
            "POST",
            RESOURCE_FILE_RENAME,
            params,
            STATUS_CREATED,
            decode_storage_object,
            timeout=timeout,
        )
