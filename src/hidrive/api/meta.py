"""Operations on the HiDrive ``/meta`` resource."""

from __future__ import annotations

from hidrive.api.base import STATUS_OK, STATUS_OK_OR_NO_CONTENT, Api
from hidrive.api.decoding import decode_storage_object
from hidrive.api.models import StorageObject
from hidrive.api.params import Parameters

RESOURCE_META = "meta"


class MetaApi(Api):
    """Metadata of any filesystem object (dir, file or symlink)."""

    def get(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Get metadata of a filesystem object.

        Supported parameters: path, pid, fields.
        """
        return self.call(
            "GET", RESOURCE_META, params, STATUS_OK, decode_storage_object, timeout=timeout
        )

    def update(
        self, params: Parameters, *, timeout: float | None = None
    ) -> StorageObject | None:
        """Modify metadata; ``mtime`` is currently the only changeable attribute.

        Returns the updated object, or None when the API answers 204 without a body.

        Supported parameters: path, pid, mtime.
        """
        response = self.open(
            "PATCH", RESOURCE_META, params, STATUS_OK_OR_NO_CONTENT, timeout=timeout
        )
        body = response.read_all()
        if response.status_code == 204 or not body:
            return None
        return decode_storage_object(body)
