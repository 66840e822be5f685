"""Account outbound adapter."""

from app.adapters.outbound.accounts.in_memory_account_repository import InMemoryAccountRepository
from app.adapters.outbound.accounts.postgres_account_repository import PostgresAccountRepository

__all__ = [
    "InMemoryAccountRepository",
    "PostgresAccountRepository",
]
