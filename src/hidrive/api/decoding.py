"""JSON decoding of HiDrive responses into model objects.

Each decoder starts from a record pre-seeded with the model defaults, so a
numeric field the API leaves out resolves to ``UNKNOWN`` (-1) instead of
zero, then merges the received fields over it with strict type checks.
Anything that does not fit raises ``DecodeError``; nothing is silently
defaulted.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import unquote

from hidrive.api.errors import DecodeError, ServiceError
from hidrive.api.models import (
    FIELD_CODE,
    FIELD_DONE,
    FIELD_FAILED,
    FIELD_MEMBERS,
    FIELD_MSG,
    FIELD_NAME,
    FIELD_TO,
    UNKNOWN,
    InviteOutcome,
    InviteStatus,
    ShareObject,
    StorageObject,
)

# A "%" not followed by two hex digits makes the whole name unescapable.
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

Converter = Callable[[str, Any], Any]


# ----------------------------------------------------------------------
# Timestamps
# ----------------------------------------------------------------------


def decode_timestamp(value: Any) -> datetime:
    """Convert Unix-epoch seconds into a timezone-aware UTC datetime.

    Raises:
        DecodeError: If ``value`` is not an integer.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected Unix timestamp, got {value!r}")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise DecodeError(f"Timestamp out of range: {value}") from exc


def encode_timestamp(value: datetime) -> int:
    """Convert a datetime into Unix-epoch seconds.

    Naive datetimes are taken as local time, like ``datetime.timestamp``.
    """
    return math.floor(value.timestamp())


# ----------------------------------------------------------------------
# Field converters
# ----------------------------------------------------------------------


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Field '{key}' should be a string, got {type(value).__name__}")
    return value


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Field '{key}' should be an integer, got {type(value).__name__}")
    return value


def _as_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"Field '{key}' should be a boolean, got {type(value).__name__}")
    return value


def _as_time(key: str, value: Any) -> datetime:
    try:
        return decode_timestamp(value)
    except DecodeError as exc:
        raise DecodeError(f"Field '{key}': {exc}") from exc


def _as_members(key: str, value: Any) -> tuple[StorageObject, ...]:
    if not isinstance(value, list):
        raise DecodeError(f"Field '{key}' should be an array, got {type(value).__name__}")
    return tuple(storage_object_from_dict(item) for item in value)


_STORAGE_FIELDS: dict[str, Converter] = {
    "path": _as_str,
    "type": _as_str,
    "id": _as_str,
    "parent_id": _as_str,
    "name": _as_str,
    "size": _as_int,
    "nmembers": _as_int,
    "mtime": _as_time,
    "ctime": _as_time,
    "mhash": _as_str,
    "mohash": _as_str,
    "nhash": _as_str,
    "chash": _as_str,
    "teamfolder": _as_bool,
    "readable": _as_bool,
    "writable": _as_bool,
    "shareable": _as_bool,
    "mime_type": _as_str,
    FIELD_MEMBERS: _as_members,
}

_SHARE_FIELDS: dict[str, Converter] = {
    "id": _as_str,
    "path": _as_str,
    "status": _as_str,
    "file_type": _as_str,
    "count": _as_int,
    "created": _as_time,
    "has_password": _as_bool,
    "is_encrypted": _as_bool,
    "last_modified": _as_time,
    "maxcount": _as_int,
    "name": _as_str,
    "password": _as_str,
    "pid": _as_str,
    "readable": _as_bool,
    "remaining": _as_int,
    "share_type": _as_str,
    "size": _as_int,
    "ttl": _as_int,
    "uri": _as_str,
    "valid_until": _as_time,
    "viewmode": _as_str,
    "writable": _as_bool,
}

_STORAGE_DEFAULTS: dict[str, Any] = {"size": UNKNOWN, "nmembers": UNKNOWN}

_SHARE_DEFAULTS: dict[str, Any] = {
    "size": UNKNOWN,
    "ttl": UNKNOWN,
    "maxcount": UNKNOWN,
    "count": UNKNOWN,
    "remaining": UNKNOWN,
}


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def load_json(body: bytes | str) -> Any:
    """Parse a response body as JSON.

    Raises:
        DecodeError: If the body is not valid UTF-8 JSON.
    """
    try:
        return json.loads(body)
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON response: {exc}") from exc


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _merge(
    defaults: Mapping[str, Any],
    data: Mapping[str, Any],
    fields: Mapping[str, Converter],
) -> dict[str, Any]:
    """Merge known, non-null fields of ``data`` over ``defaults``."""
    record = dict(defaults)
    for key, convert in fields.items():
        value = data.get(key)
        if value is None:
            continue
        record[key] = convert(key, value)
    return record


def unescape_name(name: str) -> str:
    """Percent-decode a name, returning it unchanged if it is not valid escaped UTF-8."""
    if _MALFORMED_ESCAPE.search(name):
        return name
    try:
        return unquote(name, errors="strict")
    except UnicodeDecodeError:
        return name


# ----------------------------------------------------------------------
# Public decoders
# ----------------------------------------------------------------------


def storage_object_from_dict(data: Any) -> StorageObject:
    """Build a StorageObject from an already parsed JSON object."""
    record = _merge(_STORAGE_DEFAULTS, _require_object(data, "storage object"), _STORAGE_FIELDS)
    if FIELD_NAME in record:
        record[FIELD_NAME] = unescape_name(record[FIELD_NAME])
    return StorageObject(**record)


def share_object_from_dict(data: Any) -> ShareObject:
    """Build a ShareObject from an already parsed JSON object."""
    return ShareObject(**_merge(_SHARE_DEFAULTS, _require_object(data, "share"), _SHARE_FIELDS))


def decode_storage_object(body: bytes | str) -> StorageObject:
    """Decode a directory, file or metadata response body.

    Args:
        body: Raw JSON response body.

    Returns:
        The decoded StorageObject, with ``size``/``nmembers`` set to ``UNKNOWN``
        when the API omitted them and ``name`` percent-decoded.

    Raises:
        DecodeError: If the body is not a JSON object of the expected shape.
    """
    return storage_object_from_dict(load_json(body))


def decode_share_object(body: bytes | str) -> ShareObject:
    """Decode a share or sharelink response body."""
    return share_object_from_dict(load_json(body))


def decode_share_objects(body: bytes | str) -> list[ShareObject]:
    """Decode a share listing, which the API returns as an array or a single object."""
    data = load_json(body)
    if isinstance(data, list):
        return [share_object_from_dict(item) for item in data]
    return [share_object_from_dict(data)]


def _invite_status_from_dict(data: Any) -> InviteStatus:
    item = _require_object(data, "invite status")
    to = item.get(FIELD_TO)
    code = item.get(FIELD_CODE)
    msg = item.get(FIELD_MSG)
    return InviteStatus(
        to=_as_str(FIELD_TO, to) if to is not None else "",
        code=_as_int(FIELD_CODE, code) if code is not None else 0,
        msg=_as_str(FIELD_MSG, msg) if msg is not None else "",
    )


def _invite_list(data: Mapping[str, Any], key: str) -> tuple[InviteStatus, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise DecodeError(f"Field '{key}' should be an array, got {type(value).__name__}")
    return tuple(_invite_status_from_dict(item) for item in value)


def decode_invite_outcome(body: bytes | str) -> InviteOutcome:
    """Decode the ``{done: [...], failed: [...]}`` body of a share invitation."""
    data = _require_object(load_json(body), "invite outcome")
    return InviteOutcome(
        done=_invite_list(data, FIELD_DONE),
        failed=_invite_list(data, FIELD_FAILED),
    )


def decode_service_error(status_code: int, body: bytes | str) -> ServiceError:
    """Translate a ``{code, msg}`` error body into a ServiceError.

    The code is passed through untouched, whatever its JSON type.

    Raises:
        DecodeError: If the body is not a JSON object or ``msg`` is not a string.
    """
    data = _require_object(load_json(body), "error body")
    msg = data.get(FIELD_MSG)
    message = _as_str(FIELD_MSG, msg) if msg is not None else ""
    return ServiceError(status_code, data.get(FIELD_CODE), message)
