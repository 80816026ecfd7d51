"""Operations on the HiDrive ``/dir`` resource, including recursive creation."""

from __future__ import annotations

import logging

from hidrive.api.base import STATUS_CREATED, STATUS_NO_CONTENT, STATUS_OK, Api
from hidrive.api.decoding import decode_storage_object
from hidrive.api.errors import DecodeError, PreconditionError, ServiceError
from hidrive.api.models import FIELD_PATH, StorageObject
from hidrive.api.params import MEMBERS_NONE, Parameters

logger = logging.getLogger(__name__)

RESOURCE_DIR = "dir"


def ancestor_paths(path: str) -> list[str]:
    """Return the intermediate directories ``create_path`` must make sure exist.

    The top-level directory (e.g. ``/public``) and the target itself are
    not included, so ``/public/a/b/c`` yields ``["/public/a", "/public/a/b"]``
    and ``/public/x`` yields nothing.

    Args:
        path: Target directory path, absolute or relative.

    Returns:
        Ancestor paths, outermost first.
    """
    parts = [part for part in path.split("/") if part]
    prefix = "/" if path.startswith("/") else ""
    return [prefix + "/".join(parts[:k]) for k in range(2, len(parts))]


class DirApi(Api):
    """Directory operations: get, create, create with parents, delete."""

    def get(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Query a directory and, optionally, its members.

        ``path`` and ``pid`` identify the directory; at least one is required.
        When both are given, ``path`` is relative to the directory ``pid``
        addresses. Names in the result are percent-decoded; the API applies an
        implicit limit of 5000 members.

        Supported parameters: path, pid, members, limit, fields, sort, sort_lang.
        """
        return self.call(
            "GET", RESOURCE_DIR, params, STATUS_OK, decode_storage_object, timeout=timeout
        )

    def create(self, params: Parameters, *, timeout: float | None = None) -> StorageObject:
        """Create a single directory; its parent must already exist.

        Supported parameters: path, pid, on_exist, mtime, parent_mtime.
        """
        return self.call(
            "POST", RESOURCE_DIR, params, STATUS_CREATED, decode_storage_object, timeout=timeout
        )

    def delete(self, params: Parameters, *, timeout: float | None = None) -> None:
        """Delete a directory.

        Non-empty directories are only removed when ``recursive`` is true.

        Supported parameters: path, pid, recursive, parent_mtime.
        """
        self.call_no_content("DELETE", RESOURCE_DIR, params, STATUS_NO_CONTENT, timeout=timeout)

    def exists(self, path: str, *, timeout: float | None = None) -> bool:
        """Probe whether a directory exists with the cheapest possible query.

        Only the ``path`` field is requested and no members are listed. Any
        service or decode error counts as "missing"; transport errors propagate.
        """
        probe = Parameters().set_path(path).set_members([MEMBERS_NONE]).set_fields([FIELD_PATH])
        try:
            self.get(probe, timeout=timeout)
        except (ServiceError, DecodeError) as exc:
            logger.debug("[exists] probe failed; path:%s;error:%s", path, exc)
            return False
        return True

    def create_path(self, path: str, *, timeout: float | None = None) -> StorageObject:
        """Create a directory together with any missing parents, like ``mkdir -p``.

        Ancestors are probed and created one at a time, outermost first. The
        first failing create aborts the whole call with that create's error;
        ancestors created before the failure stay on the server.

        Args:
            path: Directory path to create, e.g. "/public/a/b/c".
            timeout: Per-request deadline forwarded to the transport.

        Returns:
            StorageObject describing the created target directory.

        Raises:
            PreconditionError: If ``path`` is empty; no request is sent.
            ServiceError: If creating an ancestor or the target fails.
        """
        if not path:
            raise PreconditionError("path: value should not be empty")

        for ancestor in ancestor_paths(path):
            if self.exists(ancestor, timeout=timeout):
                continue
            logger.info("[create_path] creating missing ancestor; path:%s", ancestor)
            self.create(Parameters().set_path(ancestor), timeout=timeout)

        created = self.create(Parameters().set_path(path), timeout=timeout)
        logger.info("[create_path] created directory; path:%s", path)
        return created
