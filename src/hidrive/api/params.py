"""Query parameters for HiDrive API requests.

Every HiDrive operation takes its arguments as URL query parameters.
``Parameters`` collects them as an ordered multi-map; each setter returns a
new instance so a value built once can be shared between calls safely.

Example:
    params = Parameters().set_path("/public/docs").set_members(["dir", "file"])
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import parse_qsl, urlencode

from hidrive.api.decoding import encode_timestamp
from hidrive.api.errors import PreconditionError

# Query parameter names
PARAM_PATH = "path"
PARAM_PID = "pid"
PARAM_MEMBERS = "members"
PARAM_LIMIT = "limit"
PARAM_FIELDS = "fields"
PARAM_SORT = "sort"
PARAM_SORT_LANG = "sort_lang"
PARAM_ON_EXIST = "on_exist"
PARAM_MTIME = "mtime"
PARAM_PARENT_MTIME = "parent_mtime"
PARAM_RECURSIVE = "recursive"
PARAM_DIR = "dir"
PARAM_DIR_ID = "dir_id"
PARAM_NAME = "name"
PARAM_MAXCOUNT = "maxcount"
PARAM_PASSWORD = "password"
PARAM_WRITABLE = "writable"
PARAM_TTL = "ttl"
PARAM_SALT = "salt"
PARAM_SHARE_ACCESS_KEY = "share_access_key"
PARAM_PW_SHAREKEY = "pw_sharekey"
PARAM_ID = "id"
PARAM_RECIPIENT = "recipient"
PARAM_MSG = "msg"
PARAM_SRC = "src"
PARAM_SRC_ID = "src_id"
PARAM_DST = "dst"
PARAM_DST_ID = "dst_id"
PARAM_SRC_PARENT_MTIME = "src_parent_mtime"
PARAM_DST_PARENT_MTIME = "dst_parent_mtime"
PARAM_PRESERVE_MTIME = "preserve_mtime"
PARAM_TYPE = "type"

# Values accepted by on_exist
ON_EXIST_AUTONAME = "autoname"
ON_EXIST_OVERWRITE = "overwrite"

# Values accepted by members
MEMBERS_NONE = "none"
MEMBERS_ALL = "all"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _format_time(value: datetime) -> str:
    return str(encode_timestamp(value))


@dataclass(frozen=True)
class Parameters:
    """Immutable ordered multi-map of query parameter names to values."""

    pairs: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> Parameters:
        """Build parameters from a plain mapping, keeping its iteration order."""
        return cls(tuple((str(k), str(v)) for k, v in values.items()))

    @classmethod
    def from_query(cls, query: str) -> Parameters:
        """Parse an encoded query string back into parameters."""
        return cls(tuple(parse_qsl(query, keep_blank_values=True)))

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------

    def set(self, key: str, value: str) -> Parameters:
        """Return a copy where ``key`` holds exactly one value.

        Existing occurrences of ``key`` are dropped and the new pair is
        appended at the end.
        """
        kept = tuple(pair for pair in self.pairs if pair[0] != key)
        return Parameters((*kept, (key, str(value))))

    def add(self, key: str, value: str) -> Parameters:
        """Return a copy with one more occurrence of ``key``."""
        return Parameters((*self.pairs, (key, str(value))))

    def remove(self, key: str) -> Parameters:
        """Return a copy without any occurrence of ``key``."""
        return Parameters(tuple(pair for pair in self.pairs if pair[0] != key))

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the first value stored under ``key``."""
        for name, value in self.pairs:
            if name == key:
                return value
        return default

    def get_all(self, key: str) -> list[str]:
        return [value for name, value in self.pairs if name == key]

    def to_query(self) -> str:
        """Percent-encode the parameters as a URL query string."""
        return urlencode(self.pairs)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.pairs)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    # ------------------------------------------------------------------
    # Object addressing
    # ------------------------------------------------------------------

    def set_path(self, path: str) -> Parameters:
        """Path to a filesystem object.

        Used together with ``pid``, the path is relative to the directory the
        pid addresses.
        """
        return self.set(PARAM_PATH, path)

    def set_pid(self, pid: str) -> Parameters:
        """Public id of a filesystem object, or of the parent directory when a path is set."""
        return self.set(PARAM_PID, pid)

    def set_id(self, share_id: str) -> Parameters:
        """Share or sharelink id."""
        return self.set(PARAM_ID, share_id)

    def set_dir(self, directory: str) -> Parameters:
        """Target directory of an upload."""
        return self.set(PARAM_DIR, directory)

    def set_dir_id(self, dir_id: str) -> Parameters:
        return self.set(PARAM_DIR_ID, dir_id)

    def set_name(self, name: str) -> Parameters:
        """Intended file name of an upload or rename."""
        return self.set(PARAM_NAME, name)

    def set_file_path(self, path: str) -> Parameters:
        """Split ``path`` into ``dir`` (everything before the last ``/``) and ``name``.

        Args:
            path: Full path of the target file, e.g. "/public/docs/report.pdf".

        Returns:
            Parameters with both ``dir`` and ``name`` set.
        """
        directory, _, name = path.rpartition("/")
        return self.set_dir(directory).set_name(name)

    def set_src(self, src: str) -> Parameters:
        return self.set(PARAM_SRC, src)

    def set_src_id(self, src_id: str) -> Parameters:
        return self.set(PARAM_SRC_ID, src_id)

    def set_dst(self, dst: str) -> Parameters:
        return self.set(PARAM_DST, dst)

    def set_dst_id(self, dst_id: str) -> Parameters:
        return self.set(PARAM_DST_ID, dst_id)

    # ------------------------------------------------------------------
    # Listing and result shaping
    # ------------------------------------------------------------------

    def set_members(self, members: Iterable[str]) -> Parameters:
        """Content types to list: "all", "none", "dir", "file" or "symlink"."""
        return self.set(PARAM_MEMBERS, ",".join(members))

    def set_limit(self, limit: int, offset: int = 0) -> Parameters:
        """Limit the number of directory entries returned, starting at ``offset``."""
        if limit < 0 or offset < 0:
            raise PreconditionError("limit: value should not be negative")
        return self.set(PARAM_LIMIT, f"{offset},{limit}")

    def set_fields(self, fields: Iterable[str]) -> Parameters:
        """Restrict the response to the given fields (e.g. "path", "members.name").

        Asking only for what is needed keeps responses small; the API
        computes some fields (hashes, recursive sizes) on demand.
        """
        return self.set(PARAM_FIELDS, ",".join(fields))

    def set_sort_by(self, sort_by: str) -> Parameters:
        return self.set(PARAM_SORT, sort_by)

    def set_sort_lang(self, lang: str) -> Parameters:
        return self.set(PARAM_SORT_LANG, lang)

    # ------------------------------------------------------------------
    # Write behaviour
    # ------------------------------------------------------------------

    def set_on_exist(self, on_exist: str) -> Parameters:
        """Conflict policy when the target exists ("autoname" or "overwrite")."""
        return self.set(PARAM_ON_EXIST, on_exist)

    def set_mtime(self, mtime: datetime) -> Parameters:
        return self.set(PARAM_MTIME, _format_time(mtime))

    def set_parent_mtime(self, mtime: datetime) -> Parameters:
        return self.set(PARAM_PARENT_MTIME, _format_time(mtime))

    def set_src_parent_mtime(self, mtime: datetime) -> Parameters:
        return self.set(PARAM_SRC_PARENT_MTIME, _format_time(mtime))

    def set_dst_parent_mtime(self, mtime: datetime) -> Parameters:
        return self.set(PARAM_DST_PARENT_MTIME, _format_time(mtime))

    def set_preserve_mtime(self, preserve: bool) -> Parameters:
        return self.set(PARAM_PRESERVE_MTIME, _format_bool(preserve))

    def set_recursive(self, recursive: bool) -> Parameters:
        """Allow deleting non-empty directories."""
        return self.set(PARAM_RECURSIVE, _format_bool(recursive))

    # ------------------------------------------------------------------
    # Shares
    # ------------------------------------------------------------------

    def set_max_count(self, count: int) -> Parameters:
        """Number of share tokens that can be issued."""
        return self.set(PARAM_MAXCOUNT, str(count))

    def set_password(self, password: str) -> Parameters:
        return self.set(PARAM_PASSWORD, password)

    def set_writable(self, writable: bool) -> Parameters:
        return self.set(PARAM_WRITABLE, _format_bool(writable))

    def set_ttl(self, ttl: int) -> Parameters:
        """Share expiry, in seconds from now."""
        if ttl < 0:
            raise PreconditionError("ttl: value should not be negative")
        return self.set(PARAM_TTL, str(ttl))

    def set_salt(self, salt: str) -> Parameters:
        """Salt generated by hdcrypt for encrypted shares."""
        return self.set(PARAM_SALT, salt)

    def set_share_access_key(self, key: str) -> Parameters:
        return self.set(PARAM_SHARE_ACCESS_KEY, key)

    def set_pw_share_key(self, key: str) -> Parameters:
        return self.set(PARAM_PW_SHAREKEY, key)

    def set_recipient(self, recipient: str) -> Parameters:
        """RFC 822 e-mail address of an invite recipient."""
        return self.set(PARAM_RECIPIENT, recipient)

    def add_recipient(self, recipient: str) -> Parameters:
        """Append another invite recipient."""
        return self.add(PARAM_RECIPIENT, recipient)

    def set_msg(self, msg: str) -> Parameters:
        return self.set(PARAM_MSG, msg)
