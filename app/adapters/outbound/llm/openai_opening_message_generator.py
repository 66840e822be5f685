"""OpenAI opening message generator adapter."""

from typing import Optional

from openai import OpenAI

from app.application.ports.opening_message_generator import OpeningMessageGenerator
from app.application.use_cases.group_intro_prompt import build_opening_prompt
from app.domain.entities.introduction import Introduction
from app.domain.entities.session import Session
from app.domain.errors import UpstreamError
from app.infrastructure.config.settings import settings


class OpenAIOpeningMessageGenerator(OpeningMessageGenerator):
    """Opening message generator implementation using the official OpenAI SDK."""

    SYSTEM_PROMPT = (
        "You are a warm, empathetic wellness coach guiding a group session. "
        "Reply with the opening message only."
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        """
        Initialize OpenAI generator.

        Args:
            api_key: OpenAI API key (defaults to settings.openai_api_key)
            model: Model name (defaults to settings.openai_model)
            timeout_seconds: Request timeout in seconds (defaults to settings.openai_timeout_seconds)
        """
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._timeout = timeout_seconds or settings.openai_timeout_seconds

        if not self._api_key:
            raise ValueError("OpenAI API key is required")

        self._client = OpenAI(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=1,
        )

    def generate_opening(
        self, session: Session, introductions: list[Introduction]
    ) -> Optional[str]:
        """
        Generate a personalised opening for a group session.

        Args:
            session: Group session being opened
            introductions: Participant introductions, earliest first

        Returns:
            Opening message, or None when there are no introductions

        Raises:
            UpstreamError: If the OpenAI call fails or returns an empty reply
        """
        if not introductions:
            return None

        messages = [
            {"role": "system", "content": self.SYSTEM_PROMPT},
            {"role": "user", "content": build_opening_prompt(session, introductions)},
        ]

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=0.7,
                max_tokens=300,
            )
        except Exception as e:
            raise UpstreamError(
                f"OpenAI API call failed: {str(e)}", {"session_id": session.session_id}
            ) from e

        if not response.choices or response.choices[0].message.content is None:
            raise UpstreamError("Empty response from OpenAI API", {"session_id": session.session_id})

        reply = response.choices[0].message.content.strip()
        if not reply:
            raise UpstreamError("Empty reply from OpenAI API", {"session_id": session.session_id})
        return reply
