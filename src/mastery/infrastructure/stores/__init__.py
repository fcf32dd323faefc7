from .json_file_store import JsonFileStore
from .memory_store import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore"]
