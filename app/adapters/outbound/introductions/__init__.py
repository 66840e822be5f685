"""Introduction outbound adapter."""

from app.adapters.outbound.introductions.in_memory_introduction_repository import (
    InMemoryIntroductionRepository,
)
from app.adapters.outbound.introductions.postgres_introduction_repository import (
    PostgresIntroductionRepository,
)

__all__ = [
    "InMemoryIntroductionRepository",
    "PostgresIntroductionRepository",
]
