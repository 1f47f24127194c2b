from abc import abstractmethod
from typing import Protocol

from foundrelay.domain.listing.model.server import FoundServer
from foundrelay.domain.shared.port import Port


class Notifier(Port, Protocol):
    """Delivers one message about a newly stored server to an external sink."""

    @abstractmethod
    async def notify(self, server: FoundServer) -> None: ...
