"""Operations on the HiDrive ``/share`` resource (directory shares)."""

from __future__ import annotations

from hidrive.api.base import (
    STATUS_CREATED,
    STATUS_NO_CONTENT,
    STATUS_OK,
    STATUS_OK_OR_MULTI_STATUS,
    Api,
)
from hidrive.api.decoding import decode_invite_outcome, decode_share_object, decode_share_objects
from hidrive.api.models import InviteOutcome, ShareObject
from hidrive.api.params import Parameters

RESOURCE_SHARE = "share"
RESOURCE_SHARE_INVITE = "share/invite"


class ShareApi(Api):
    """Directory shares and e-mail invitations to them."""

    def get(
        self, params: Parameters | None = None, *, timeout: float | None = None
    ) -> list[ShareObject]:
        """List shares of the authenticated user.

        Without ``id``, ``path`` or ``pid`` every share is returned; with one
        of them the list holds only the matching share.

        Supported parameters: id, path, pid, fields.
        """
        return self.call(
            "GET", RESOURCE_SHARE, params, STATUS_OK, decode_share_objects, timeout=timeout
        )

    def create(self, params: Parameters, *, timeout: float | None = None) -> ShareObject:
        """Share a directory.

        Anyone who knows the returned share id can read (or, with
        ``writable``, write) everything below the directory. The share may be
        limited with ``ttl`` and ``maxcount`` and protected with a password.
        ``salt``, ``share_access_key`` and ``pw_sharekey`` set up an encrypted
        share and are passed through as given.

        Supported parameters: path, pid, maxcount, password, writable, ttl,
        salt, share_access_key, pw_sharekey.
        """
        return self.call(
            "POST", RESOURCE_SHARE, params, STATUS_CREATED, decode_share_object, timeout=timeout
        )

    def update(self, params: Parameters, *, timeout: float | None = None) -> ShareObject:
        """Change ``ttl``, ``maxcount`` or the password of a share.

        The shared directory itself cannot be changed; create a new share instead.

        Supported parameters: id, maxcount, password, writable, ttl, salt,
        share_access_key, pw_sharekey.
        """
        return self.call(
            "PUT", RESOURCE_SHARE, params, STATUS_OK, decode_share_object, timeout=timeout
        )

    def delete(self, params: Parameters, *, timeout: float | None = None) -> None:
        """Delete a share, invalidating its access tokens immediately.

        Supported parameters: id.
        """
        self.call_no_content("DELETE", RESOURCE_SHARE, params, STATUS_NO_CONTENT, timeout=timeout)

    def invite(self, params: Parameters, *, timeout: float | None = None) -> InviteOutcome:
        """Invite people to a share by e-mail.

        The API answers 200 when every recipient got the same status and 207
        when outcomes differ; both are decoded into ``done`` and ``failed``.

        Supported parameters: id, recipient (repeatable), msg.
        """
        return self.call(
            "POST",
            RESOURCE_SHARE_INVITE,
            params,
            STATUS_OK_OR_MULTI_STATUS,
            decode_invite_outcome,
            timeout=timeout,
        )
