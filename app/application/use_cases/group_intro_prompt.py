"""Prompt construction for personalised group openings."""

from app.domain.entities.introduction import (
    FamilyIntroduction,
    Introduction,
    RelationshipIntroduction,
)
from app.domain.entities.session import GroupCategory, Session


def summarize_introduction(introduction: Introduction, label: str = "A participant") -> str:
    """
    Render one introduction as a single line.

    Args:
        introduction: Participant introduction
        label: How to refer to the participant

    Returns:
        One-line summary with only the answers that were given
    """
    a = introduction.answers
    parts = [label]
    if isinstance(a, RelationshipIntroduction):
        if a.relationship_role:
            parts.append(f" ({a.relationship_role})")
        if a.goals:
            parts.append(f" wants to work on: {a.goals}")
        if a.challenges:
            parts.append(f". Challenges: {a.challenges}")
        if a.why_wellness:
            parts.append(f". Why wellness: {a.why_wellness}")
    elif isinstance(a, FamilyIntroduction):
        if a.family_role:
            parts.append(f" ({a.family_role})")
        if a.family_goals:
            parts.append(f" wants to achieve: {a.family_goals}")
        if a.what_to_achieve:
            parts.append(f". Specifically: {a.what_to_achieve}")
        if a.why_wellness:
            parts.append(f". Why wellness: {a.why_wellness}")
    else:
        if a.participant_role:
            parts.append(f" ({a.participant_role})")
        if a.personal_goals:
            parts.append(f" has goals: {a.personal_goals}")
        if a.expectations:
            parts.append(f". Expectations: {a.expectations}")
        if a.wellness_reason:
            parts.append(f". Reason: {a.wellness_reason}")
    return "".join(parts)


def build_opening_prompt(session: Session, introductions: list[Introduction]) -> str:
    """
    Build the prompt asking for a welcoming group opening.

    Args:
        session: Group session being (re)started
        introductions: Participant introductions, earliest first

    Returns:
        Prompt text
    """
    category = (session.category or GroupCategory.GENERAL).value
    summaries = "\n".join(
        summarize_introduction(intro, f"Participant {i}")
        for i, intro in enumerate(introductions, start=1)
    )
    return (
        f"You are a warm, empathetic wellness coach starting a {category} group wellness session.\n\n"
        "Based on the following participant introductions, create a personalized, welcoming "
        "opening message that:\n"
        "1. Acknowledges everyone's presence and their individual goals\n"
        "2. Highlights common themes or shared objectives\n"
        "3. Sets a positive, collaborative tone\n"
        "4. Invites the group to begin their wellness journey together\n\n"
        f"Participant Introductions:\n{summaries}\n\n"
        "Create a welcoming message (2-3 sentences) that addresses the group as a whole "
        "while acknowledging their individual goals."
    )
