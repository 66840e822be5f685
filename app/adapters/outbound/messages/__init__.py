"""Chat message outbound adapter."""

from app.adapters.outbound.messages.in_memory_message_store import InMemoryMessageStore
from app.adapters.outbound.messages.postgres_message_store import PostgresMessageStore

__all__ = [
    "InMemoryMessageStore",
    "PostgresMessageStore",
]
