from __future__ import annotations

import asyncio
from typing import Optional

import pytest
from pydantic import ValidationError

from orbit_portfolio.assistant import (
    ask_assistant,
    build_summary_request,
    request_project_summary,
    workspace_context,
)
from orbit_portfolio.domain.models import Project, ProjectHealth, Task, TaskStatus
from orbit_portfolio.gateway import (
    AssistantProvider,
    AssistantReply,
    AssistantRequest,
    ProjectDraft,
    SummaryRequest,
    SummaryResponse,
)

SUMMARY_FALLBACK = "Failed to generate AI summary."
ASSISTANT_FALLBACK = "I'm having trouble connecting to my brain right now. Please try again."


class _StaticProvider(AssistantProvider):
    def __init__(
        self,
        response: Optional[SummaryResponse] = None,
        reply: Optional[AssistantReply] = None,
        exc: Optional[Exception] = None,
    ) -> None:
        self.response = response
        self.reply = reply
        self.exc = exc
        self.requests: list[SummaryRequest] = []
        self.questions: list[AssistantRequest] = []

    async def generate(self, request: SummaryRequest) -> SummaryResponse:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response

    async def answer(self, request: AssistantRequest) -> AssistantReply:
        self.questions.append(request)
        if self.exc is not None:
            raise self.exc
        assert self.reply is not None
        return self.reply


def _project(health: ProjectHealth = ProjectHealth.CRITICAL) -> Project:
    return Project(
        id="p1",
        name="Apollo",
        health=health,
        tasks=[Task(id="t1", title="Docs", status=TaskStatus.TODO)],
    )


class TestProjectSummary:
    def test_build_summary_request(self) -> None:
        request = build_summary_request(_project())
        assert request.project_name == "Apollo"
        assert request.tasks[0]["id"] == "t1"
        assert request.context == ""

    def test_provider_text_is_returned(self) -> None:
        provider = _StaticProvider(response=SummaryResponse(text="On track."))
        response = asyncio.run(request_project_summary(provider, _project()))
        assert response.text == "On track."
        assert response.ok is True
        assert len(provider.requests) == 1

    @pytest.mark.parametrize(
        "provider",
        [
            _StaticProvider(exc=RuntimeError("quota exceeded")),
            _StaticProvider(response=SummaryResponse(text="", ok=True)),
            _StaticProvider(response=SummaryResponse(text="partial", ok=False)),
        ],
    )
    def test_provider_failure_yields_fallback(self, provider: _StaticProvider) -> None:
        response = asyncio.run(request_project_summary(provider, _project()))
        assert response.ok is False
        assert response.text == SUMMARY_FALLBACK


class TestAskAssistant:
    def test_context_reflects_portfolio_condition(self) -> None:
        assert workspace_context([_project()]) == (
            "Portfolio Governance view active. Current organizational health is Caution."
        )
        assert workspace_context([_project(ProjectHealth.HEALTHY)]).endswith("is Optimal.")
        assert workspace_context([]).endswith("is Optimal.")

    def test_answer_is_returned(self) -> None:
        provider = _StaticProvider(reply=AssistantReply(text="Rebalance the Apollo team."))
        reply = asyncio.run(ask_assistant(provider, "Who is overloaded?", [_project()]))

        assert reply.ok is True
        assert reply.text == "Rebalance the Apollo team."
        (question,) = provider.questions
        assert question.message == "Who is overloaded?"
        assert "Caution" in question.context

    @pytest.mark.parametrize(
        "provider",
        [
            _StaticProvider(exc=ConnectionError("offline")),
            _StaticProvider(reply=AssistantReply(text="  ")),
            _StaticProvider(reply=AssistantReply(text="half", ok=False)),
        ],
    )
    def test_provider_failure_yields_fallback(self, provider: _StaticProvider) -> None:
        reply = asyncio.run(ask_assistant(provider, "Status?", [_project()]))
        assert reply.ok is False
        assert reply.text == ASSISTANT_FALLBACK

    def test_blank_question_skips_provider(self) -> None:
        provider = _StaticProvider(reply=AssistantReply(text="unused"))
        reply = asyncio.run(ask_assistant(provider, "   ", []))
        assert reply.text == ASSISTANT_FALLBACK
        assert provider.questions == []


class TestRecords:
    def test_project_draft_requires_name(self) -> None:
        with pytest.raises(ValidationError):
            ProjectDraft(name="")

    def test_project_draft_progress_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ProjectDraft(name="X", progress=101)

    def test_assistant_request_requires_message(self) -> None:
        with pytest.raises(ValidationError):
            AssistantRequest(message="")

    def test_to_project_defaults(self) -> None:
        project = ProjectDraft(name="Gemini", members=["u1"]).to_project("p9")
        assert project.id == "p9"
        assert project.tasks == []
        assert project.members == ["u1"]
        assert project.start_date == "2024-01-01"
