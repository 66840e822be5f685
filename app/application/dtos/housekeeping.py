"""Housekeeping DTOs."""

from app.application.dtos.base import DTO


class PurgeResult(DTO):
    """Counts of rows touched by a hygiene pass."""

    invites_deactivated: int
    presence_deleted: int
