"""
Entity store contract used by the review workflow.

Every primitive is atomic for a single document only. Nothing here spans two
documents; keeping listings, authors and reviews consistent with each other is
the job of the services that call these methods in a fixed order.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from app.models.base import Document

T = TypeVar("T", bound=Document)

# Back-reference array maintained on listings and authors
REVIEW_REFS = "review_refs"

SortSpec = Sequence[Tuple[str, int]]


class DocumentRepository(ABC, Generic[T]):
    """Per-collection document store"""

    @abstractmethod
    async def get(self, doc_id: str) -> Optional[T]:
        """Return the document, or None when it does not exist"""

    @abstractmethod
    async def insert(self, entity: T) -> str:
        """Insert a new document and return the identifier assigned to it"""

    @abstractmethod
    async def update_fields(
        self,
        doc_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """Set fields on one document; False when nothing matched"""

    @abstractmethod
    async def push_ref(
        self,
        doc_id: str,
        ref_id: str,
        fields: Optional[Dict[str, Any]] = None,
        expected_version: Optional[int] = None,
        array: str = REVIEW_REFS,
    ) -> bool:
        """Append ``ref_id`` unless already present, setting ``fields`` in the same write"""

    @abstractmethod
    async def pull_ref(
        self,
        doc_id: str,
        ref_id: str,
        fields: Optional[Dict[str, Any]] = None,
        expected_version: Optional[int] = None,
        array: str = REVIEW_REFS,
    ) -> bool:
        """Remove every occurrence of ``ref_id``, setting ``fields`` in the same write"""

    @abstractmethod
    async def delete(self, doc_id: str) -> bool:
        """Delete one document; False when it did not exist"""

    @abstractmethod
    async def find(
        self,
        filters: Dict[str, Any],
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> List[T]:
        """Return documents whose fields equal ``filters``"""

    async def find_one(self, filters: Dict[str, Any]) -> Optional[T]:
        found = await self.find(filters, limit=1)
        return found[0] if found else None

    async def exists(self, doc_id: str) -> bool:
        return await self.get(doc_id) is not None
