"""Operations on the HiDrive ``/sharelink`` resource (single-file shares)."""

from __future__ import annotations

from hidrive.api.base import STATUS_CREATED, STATUS_NO_CONTENT, STATUS_OK, Api
from hidrive.api.decoding import decode_share_object, decode_share_objects
from hidrive.api.models import TYPE_FILE, ShareObject
from hidrive.api.params import PARAM_TYPE, Parameters

RESOURCE_SHARELINK = "sharelink"


class ShareLinkApi(Api):
    """Sharelinks give access to one file."""

    def get(
        self, params: Parameters | None = None, *, timeout: float | None = None
    ) -> list[ShareObject]:
        """List sharelinks; with ``id`` only the matching one is returned.

        Supported parameters: id, fields.
        """
        return self.call(
            "GET", RESOURCE_SHARELINK, params, STATUS_OK, decode_share_objects, timeout=timeout
        )

    def create(self, params: Parameters, *, timeout: float | None = None) -> ShareObject:
        """Create a sharelink for a file.

        ``type`` is always sent as ``file``. Tariffs may require ``ttl`` and
        ``maxcount`` and may not offer password protection.

        Supported parameters: path, pid, maxcount, password, ttl.
        """
        return self.call(
            "POST",
            RESOURCE_SHARELINK,
            params.set(PARAM_TYPE, TYPE_FILE),
            STATUS_CREATED,
            decode_share_object,
            timeout=timeout,
        )

    def update(self, params: Parameters, *, timeout: float | None = None) -> ShareObject:
        """Update a sharelink (not available in every tariff).

        A new ``maxcount`` must not be lower than the current download count.

        Supported parameters: id, maxcount, password, ttl.
        """
        return self.call(
            "PUT", RESOURCE_SHARELINK, params, STATUS_OK, decode_share_object, timeout=timeout
        )

    def delete(self, params: Parameters, *, timeout: float | None = None) -> None:
        """Remove a sharelink.

        Supported parameters: id.
        """
        self.call_no_content(
            "DELETE", RESOURCE_SHARELINK, params, STATUS_NO_CONTENT, timeout=timeout
        )
