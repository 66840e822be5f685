"""Opening message generator port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.introduction import Introduction
from app.domain.entities.session import Session


class OpeningMessageGenerator(ABC):
    """Port interface for the text-generation collaborator."""

    @abstractmethod
    def generate_opening(
        self, session: Session, introductions: list[Introduction]
    ) -> Optional[str]:
        """
        Generate a personalised opening message for a group session.

        Args:
            session: Group session being opened
            introductions: Participant introductions, earliest first

        Returns:
            Opening message, or None when there is nothing to personalise

        Raises:
            UpstreamError: If the text-generation call fails
        """
        pass
