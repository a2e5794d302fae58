from bizdocs.infrastructure.store.backends import InMemoryBackend, JsonFileBackend, KeyValueBackend, RedisBackend
from bizdocs.infrastructure.store.document_store import STORAGE_KEYS, DocumentStore, get_document_store

__all__ = [
    "DocumentStore",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "RedisBackend",
    "STORAGE_KEYS",
    "get_document_store",
]
