"""HiDrive client bundling every resource API over one endpoint and transport."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hidrive.api.dir import DirApi
from hidrive.api.file import FileApi
from hidrive.api.meta import MetaApi
from hidrive.api.share import ShareApi
from hidrive.api.sharelink import ShareLinkApi
from hidrive.config import HIDRIVE_API_V21
from hidrive.transport import Transport, transport_from_config

if TYPE_CHECKING:
    from hidrive.config import ClientConfig


class HiDriveClient:
    """Entry point to the HiDrive API.

    Example:
        client = HiDriveClient(UrllibTransport(access_token))
        client.dir.create_path("/public/reports/2026")
        with client.file.get(Parameters().set_path("/public/notes.txt")) as resp:
            data = resp.read()
    """

    def __init__(self, transport: Transport, endpoint: str = HIDRIVE_API_V21) -> None:
        """Initialise the resource APIs.

        Args:
            transport: Authenticated transport shared by all resource APIs.
            endpoint: HiDrive API base URL.
        """
        self.dir = DirApi(transport, endpoint)
        self.file = FileApi(transport, endpoint)
        self.meta = MetaApi(transport, endpoint)
        self.share = ShareApi(transport, endpoint)
        self.sharelink = ShareLinkApi(transport, endpoint)


def hidrive_client_from_config(config: ClientConfig) -> HiDriveClient:
    """Construct a HiDriveClient from client configuration.

    Args:
        config: Client configuration instance.

    Returns:
        Configured HiDriveClient instance.
    """
    return HiDriveClient(transport_from_config(config), endpoint=config.api_endpoint)
