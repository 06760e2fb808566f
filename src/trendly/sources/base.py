"""Abstract base class for external product sources."""
from abc import ABC, abstractmethod

from trendly.schemas import ExternalProduct


class ProductSourceABC(ABC):
    """Base interface for stores we can search outside the catalog.

    Each source turns a free-text query into a list of ExternalProduct records.
    Network and parsing errors propagate; ProductSearchService maps them.
    """

    name: str = "source"

    @abstractmethod
    async def search(self, query: str) -> list[ExternalProduct]:
        """Search the store for products matching ``query``.

        Args:
            query: Free text (e.g. "iphone 15", "running shoes").

        Returns:
            Products in the order the store ranked them.
        """

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "ProductSourceABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
