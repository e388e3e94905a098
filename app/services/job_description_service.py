"""
AI drafting of job descriptions.

Produces the ``ai_generated_description`` a recruiter can merge into a job
post. Falls back to a template when no LLM is configured or the call fails.
"""
import logging
from typing import Optional

from app.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an experienced technical recruiter writing job postings.

Write a clear, attractive job description with these sections:
- About the role (2-3 sentences)
- Responsibilities (bullet list)
- Requirements (bullet list)
- Nice to have (bullet list, optional)

Use plain text with "-" bullets. Do not invent salary figures or company facts
that were not provided."""


def draft_job_description(
    title: str,
    notes: Optional[str] = None,
    current_description: Optional[str] = None,
    provider: Optional[LLMProvider] = None,
) -> str:
    """
    Draft a job description for ``title``.

    Args:
        title: Job title
        notes: Free-form recruiter notes (skills, seniority, location...)
        current_description: Existing text to improve instead of starting over
        provider: LLM provider; None uses the template fallback
    """
    if provider is None:
        logger.warning("LLM not configured - using template job description")
        return _draft_from_template(title, notes)

    parts = [f"Job title: {title}"]
    if notes:
        parts.append(f"Recruiter notes:\n{notes[:2000]}")
    if current_description:
        parts.append(f"Improve this existing description:\n{current_description[:4000]}")

    try:
        response = provider.complete(SYSTEM_PROMPT, "\n\n".join(parts), temperature=0.5, max_tokens=900)
    except Exception as e:
        logger.error(f"Error drafting job description with AI: {e}", exc_info=True)
        return _draft_from_template(title, notes)

    if response.truncated:
        logger.warning(f"AI job description hit the token limit: title={title}")

    content = response.content.strip()
    if not content:
        logger.warning("Empty AI job description, falling back to template")
        return _draft_from_template(title, notes)

    logger.info(f"AI job description drafted: title={title}, tokens_out={response.tokens_out}")
    return content


def _draft_from_template(title: str, notes: Optional[str]) -> str:
    lines = [
        "About the role",
        f"We are looking for a {title} to join our team.",
        "",
        "Responsibilities",
        f"- Own the day-to-day work of the {title} position",
        "- Collaborate with the team to deliver on shared goals",
        "",
        "Requirements",
    ]
    note_lines = [line.strip(" -*\t") for line in (notes or "").splitlines() if line.strip(" -*\t")]
    if note_lines:
        lines.extend(f"- {line}" for line in note_lines[:10])
    else:
        lines.append(f"- Proven experience as a {title} or in a similar role")
    return "\n".join(lines)
