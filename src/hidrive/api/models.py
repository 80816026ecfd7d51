"""Data models for HiDrive filesystem objects, shares and invitations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Value of a numeric field the API omitted from its response
UNKNOWN = -1

# HiDrive JSON field names referenced outside the decoder tables
FIELD_PATH = "path"
FIELD_NAME = "name"
FIELD_MEMBERS = "members"
FIELD_DONE = "done"
FIELD_FAILED = "failed"
FIELD_TO = "to"
FIELD_CODE = "code"
FIELD_MSG = "msg"

# Object type tags
TYPE_DIR = "dir"
TYPE_FILE = "file"
TYPE_SYMLINK = "symlink"

# Share status tags
STATUS_VALID = "valid"
STATUS_EXPIRED = "expired"


@dataclass(frozen=True)
class StorageObject:
    """A directory, file or symlink on the HiDrive.

    ``size`` and ``nmembers`` are ``UNKNOWN`` (-1) when the API did not
    return them, which is different from a legitimate zero. Timestamps are
    ``None`` when absent. ``members`` is only populated when the request
    asked for directory members.
    """

    path: str = ""
    type: str = ""
    id: str = ""
    parent_id: str = ""
    name: str = ""
    size: int = UNKNOWN
    nmembers: int = UNKNOWN
    mtime: datetime | None = None
    ctime: datetime | None = None
    mhash: str = ""
    mohash: str = ""
    nhash: str = ""
    chash: str = ""
    teamfolder: bool = False
    readable: bool = False
    writable: bool = False
    shareable: bool = False
    mime_type: str = ""
    members: tuple[StorageObject, ...] = ()

    @property
    def is_dir(self) -> bool:
        return self.type == TYPE_DIR

    @property
    def is_file(self) -> bool:
        return self.type == TYPE_FILE

    @property
    def is_symlink(self) -> bool:
        return self.type == TYPE_SYMLINK


@dataclass(frozen=True)
class ShareObject:
    """An access grant to a directory (share) or a single file (sharelink).

    ``count``, ``maxcount``, ``remaining``, ``size`` and ``ttl`` are
    ``UNKNOWN`` (-1) when absent. A present ``ttl`` may itself be negative,
    meaning the share has already expired.
    """

    id: str = ""
    path: str = ""
    status: str = ""
    file_type: str = ""
    count: int = UNKNOWN
    created: datetime | None = None
    has_password: bool = False
    is_encrypted: bool = False
    last_modified: datetime | None = None
    maxcount: int = UNKNOWN
    name: str = ""
    password: str = ""
    pid: str = ""
    readable: bool = False
    remaining: int = UNKNOWN
    share_type: str = ""
    size: int = UNKNOWN
    ttl: int = UNKNOWN
    uri: str = ""
    valid_until: datetime | None = None
    viewmode: str = ""
    writable: bool = False

    @property
    def is_valid(self) -> bool:
        return self.status == STATUS_VALID

    @property
    def is_expired(self) -> bool:
        return self.status == STATUS_EXPIRED


@dataclass(frozen=True)
class InviteStatus:
    """Outcome of a share invitation for one recipient."""

    to: str
    code: int = 0
    msg: str = ""


@dataclass(frozen=True)
class InviteOutcome:
    """Per-recipient results of a share invitation.

    Attributes:
        done: Recipients that were invited successfully.
        failed: Recipients that could not be invited, with the reason in ``msg``.
    """

    done: tuple[InviteStatus, ...] = ()
    failed: tuple[InviteStatus, ...] = ()
