"""Python client for the HiDrive cloud-storage REST API."""

from hidrive.api.errors import DecodeError, HiDriveError, PreconditionError, ServiceError
from hidrive.api.models import UNKNOWN, InviteOutcome, InviteStatus, ShareObject, StorageObject
from hidrive.api.params import Parameters
from hidrive.client import HiDriveClient, hidrive_client_from_config
from hidrive.transport import Request, Response, Transport, UrllibTransport

__version__ = "0.1.0"

__all__ = [
    "UNKNOWN",
    "DecodeError",
    "HiDriveClient",
    "HiDriveError",
    "InviteOutcome",
    "InviteStatus",
    "Parameters",
    "PreconditionError",
    "Request",
    "Response",
    "ServiceError",
    "ShareObject",
    "StorageObject",
    "Transport",
    "UrllibTransport",
    "hidrive_client_from_config",
]
