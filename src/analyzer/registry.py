# src/analyzer/registry.py
import logging
from typing import Dict, Generic, List, TypeVar

from analyzer.errors import DuplicateDefinitionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DefinitionRegistry(Generic[T]):
    """
    Name-keyed registry of element or module records for one analyzer.

    A name can be registered once; `register` inserts or fails in a single
    dict operation.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._records: Dict[str, T] = {}

    def register(self, record: T) -> T:
        name = record.is_
        existing = self._records.setdefault(name, record)
        if existing is not record:
            raise DuplicateDefinitionError(self.kind, name)
        logger.debug("Registered %s '%s'.", self.kind, name)
        return record

    def names(self) -> List[str]:
        return list(self._records)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)
