from __future__ import annotations

from orbit_portfolio.board import (
    TRANSITION_APPLIED,
    TRANSITION_CONFIRMED,
    TRANSITION_FAILED,
    TRANSITION_REJECTED,
    BoardEvent,
    EventChannel,
)
from orbit_portfolio.errors import RemoteWriteFailed


def test_subscribe_publish_unsubscribe() -> None:
    channel = EventChannel()
    received: list[BoardEvent] = []
    unsubscribe = channel.subscribe(received.append)
    assert channel.subscriber_count == 1

    channel.publish(BoardEvent(type=TRANSITION_APPLIED, task_id="t1"))
    unsubscribe()
    unsubscribe()
    channel.publish(BoardEvent(type=TRANSITION_CONFIRMED, task_id="t1"))

    assert [e.type for e in received] == [TRANSITION_APPLIED]
    assert channel.subscriber_count == 0


def test_failing_subscriber_is_skipped() -> None:
    channel = EventChannel()
    received: list[BoardEvent] = []

    def _broken(event: BoardEvent) -> None:
        raise RuntimeError("boom")

    channel.subscribe(_broken)
    channel.subscribe(received.append)
    channel.publish(BoardEvent(type=TRANSITION_APPLIED, task_id="t1"))

    assert len(received) == 1


def test_history_is_bounded_and_filterable() -> None:
    channel = EventChannel(history=3)
    for idx, event_type in enumerate(
        [TRANSITION_APPLIED, TRANSITION_FAILED, TRANSITION_APPLIED, TRANSITION_REJECTED, TRANSITION_CONFIRMED]
    ):
        channel.publish(BoardEvent(type=event_type, task_id=f"t{idx}"))

    assert [e.task_id for e in channel.recent()] == ["t2", "t3", "t4"]
    assert [e.task_id for e in channel.recent(limit=1)] == ["t4"]
    assert channel.recent(limit=0) == []
    assert [e.task_id for e in channel.failures()] == ["t3"]


def test_event_to_dict() -> None:
    event = BoardEvent(
        type=TRANSITION_FAILED,
        task_id="t1",
        project_id="p1",
        from_status="TODO",
        to_status="DONE",
        message="Failed to update task on the remote store.",
        error=RemoteWriteFailed("t1"),
    )
    data = event.to_dict()
    assert event.is_failure
    assert data["error"] == "Failed to update task t1"
    assert data["to_status"] == "DONE"
    assert data["ts"]
