"""Project summaries and free-form questions for the text assistant.

Text generation itself lives behind :class:`AssistantProvider`; this module
builds the typed requests and guarantees a usable answer when the provider
fails.
"""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from .constants import ASSISTANT_CONTEXT_TEMPLATE, ASSISTANT_FALLBACK_TEXT, SUMMARY_FALLBACK_TEXT
from .domain.models import Project
from .gateway.interfaces import AssistantProvider
from .gateway.records import AssistantReply, AssistantRequest, SummaryRequest, SummaryResponse
from .portfolio.aggregator import portfolio_condition


def build_summary_request(project: Project, context: str = "") -> SummaryRequest:
    return SummaryRequest(
        project_name=project.name,
        tasks=[t.to_dict() for t in project.tasks],
        context=context,
    )


def workspace_context(projects: Iterable[Project]) -> str:
    """Context line describing the portfolio's overall condition."""
    return ASSISTANT_CONTEXT_TEMPLATE.format(condition=portfolio_condition(projects))


async def request_project_summary(provider: AssistantProvider, project: Project) -> SummaryResponse:
    request = build_summary_request(project)
    try:
        response = await provider.generate(request)
    except Exception:
        logger.exception("Summary provider failed for project {}", project.id)
        return SummaryResponse(text=SUMMARY_FALLBACK_TEXT, ok=False)
    if not response.ok or not response.text.strip():
        logger.warning("Summary provider returned no text for project {}", project.id)
        return SummaryResponse(text=SUMMARY_FALLBACK_TEXT, ok=False)
    return response


async def ask_assistant(
    provider: AssistantProvider,
    message: str,
    projects: Iterable[Project],
) -> AssistantReply:
    """Ask a free-form question with the portfolio condition as context.

    A blank *message* is answered with the fallback text without calling the
    provider.
    """
    if not message.strip():
        return AssistantReply(text=ASSISTANT_FALLBACK_TEXT, ok=False)
    request = AssistantRequest(message=message, context=workspace_context(projects))
    try:
        reply = await provider.answer(request)
    except Exception:
        logger.exception("Assistant provider failed")
        return AssistantReply(text=ASSISTANT_FALLBACK_TEXT, ok=False)
    if not reply.ok or not reply.text.strip():
        logger.warning("Assistant provider returned no text")
        return AssistantReply(text=ASSISTANT_FALLBACK_TEXT, ok=False)
    return reply
