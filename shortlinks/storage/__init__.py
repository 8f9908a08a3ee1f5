from .base import BaseStore
from .memory_store import MemoryStore
from .repository import DEFAULT_KEY, MappingRepository
from .storage_factory import get_store

__all__ = ["BaseStore", "DEFAULT_KEY", "MappingRepository", "MemoryStore", "get_store"]
