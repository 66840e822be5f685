"""Readiness policy value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReadinessPolicy:
    """Rule deciding when a waiting group session may start."""

    min_ready_participants: int = 2
    require_all_ready: bool = True

    def __post_init__(self) -> None:
        """Validate policy."""
        if self.min_ready_participants < 1:
            raise ValueError("At least one ready participant is required")

    def is_satisfied(self, ready_count: int, member_count: int) -> bool:
        """
        Check the gate.

        Args:
            ready_count: Members with the ready flag set
            member_count: Current members of the session

        Returns:
            True if the session may start
        """
        if ready_count < self.min_ready_participants:
            return False
        if self.require_all_ready and ready_count < member_count:
            return False
        return True

    def required_count(self, member_count: int) -> int:
        """Number of ready members the gate currently demands."""
        if self.require_all_ready:
            return max(self.min_ready_participants, member_count)
        return self.min_ready_participants
