"""
Tests for invocation recording and annotation.
"""
import pytest

from core.events import (
    DoneEvent,
    ErrorEvent,
    TextMessageData,
    TextMessageEvent,
    ThinkingData,
    ThinkingEvent,
    ToolCallData,
    ToolCallEvent,
    ToolResultData,
    ToolResultEvent,
)
from core.exceptions import InvalidOperationError, NotFoundError, ValidationError
from core.recorder import (
    InvocationRecorder,
    RecorderState,
    apply_feedback,
    edit_agent_message,
)
from helpers import make_invocation


def text(content: str, author: str = "weather_agent") -> TextMessageEvent:
    return TextMessageEvent(data=TextMessageData(id="m", content=content, author=author))


def call(call_id: str, name: str = "get_weather", **args) -> ToolCallEvent:
    return ToolCallEvent(data=ToolCallData(id=call_id, name=name, args=args))


def result(call_id: str, value, name: str = "get_weather") -> ToolResultEvent:
    return ToolResultEvent(data=ToolResultData(id=call_id, name=name, result=value))


class TestInvocationRecorder:
    """Folding a turn's events into an Invocation."""

    def test_full_turn_is_sealed(self):
        recorder = InvocationRecorder("conv_1")
        recorder.begin("Weather in Paris?")
        recorder.apply(ThinkingEvent(data=ThinkingData(thoughtSignature="s", author="weather_agent")))
        recorder.apply(call("fc_1", city="Paris"))
        recorder.apply(result("fc_1", {"forecast": "sunny"}))
        recorder.apply(text("It is sunny."))

        sealed = recorder.apply(DoneEvent())

        assert recorder.state == RecorderState.SEALED
        assert sealed is not None
        assert sealed.invocation_id.startswith("inv_")
        assert sealed.timestamp > 0
        assert sealed.user_message == "Weather in Paris?"
        assert sealed.agent_message == "It is sunny."
        assert sealed.custom_original_agent_message == "It is sunny."
        assert sealed.author == "weather_agent"
        assert [e["type"] for e in sealed.events] == ["thinking", "tool_call", "tool_result"]
        assert len(sealed.tool_calls) == 1
        assert sealed.tool_calls[0].name == "get_weather"
        assert sealed.tool_calls[0].args == {"city": "Paris"}
        assert sealed.tool_calls[0].result == {"forecast": "sunny"}
        assert recorder.invocations == [sealed]

    def test_text_segments_joined_with_blank_line(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(text("First."))
        recorder.apply(call("fc_1"))
        recorder.apply(text("Second."))

        sealed = recorder.apply(DoneEvent())

        assert sealed.agent_message == "First.\n\nSecond."

    def test_timeline_keeps_arrival_order(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(call("a", name="first"))
        recorder.apply(call("b", name="second"))
        recorder.apply(result("b", 2, name="second"))
        recorder.apply(result("a", 1, name="first"))

        sealed = recorder.apply(DoneEvent())

        assert [(e["type"], e["data"]["id"]) for e in sealed.events] == [
            ("tool_call", "a"),
            ("tool_call", "b"),
            ("tool_result", "b"),
            ("tool_result", "a"),
        ]
        assert [c.result for c in sealed.tool_calls] == [1, 2]

    def test_result_matched_by_name_when_ids_differ(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(call("call_generated_1"))
        recorder.apply(result("call_generated_2", "ok"))

        sealed = recorder.apply(DoneEvent())

        assert sealed.tool_calls[0].result == "ok"

    def test_error_aborts_and_discards_draft(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(text("partial"))

        assert recorder.apply(ErrorEvent(error="Agent Engine HTTP 500")) is None

        assert recorder.state == RecorderState.ABORTED
        assert recorder.last_error == "Agent Engine HTTP 500"
        assert recorder.last_user_message == "hi"
        assert recorder.draft is None
        assert recorder.invocations == []

    def test_resubmit_after_error(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(ErrorEvent(error="boom"))

        recorder.begin("hi")
        recorder.apply(text("hello"))
        recorder.apply(DoneEvent())

        assert len(recorder.invocations) == 1
        assert recorder.last_error is None

    def test_begin_while_in_progress_raises(self):
        recorder = InvocationRecorder()
        recorder.begin("one")

        with pytest.raises(InvalidOperationError):
            recorder.begin("two")

    def test_apply_while_idle_raises(self):
        with pytest.raises(InvalidOperationError):
            InvocationRecorder().apply(text("stray"))

    def test_listeners_are_separate(self):
        text_updates, timeline_updates = [], []
        recorder = InvocationRecorder(
            on_text=lambda draft, event: text_updates.append(draft.agent_message),
            on_timeline=lambda draft, event: timeline_updates.append(event.type),
        )
        recorder.begin("hi")
        recorder.apply(text("a"))
        recorder.apply(call("fc_1"))
        recorder.apply(text("b"))

        assert text_updates == ["a", "a\n\nb"]
        assert timeline_updates == ["tool_call"]

    def test_fail_aborts_open_turn(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")

        recorder.fail("connection lost")

        assert recorder.state == RecorderState.ABORTED
        assert recorder.last_error == "connection lost"
        assert not recorder.in_progress

    def test_reset_starts_empty_conversation(self):
        recorder = InvocationRecorder("old", invocations=[make_invocation()])

        recorder.reset("new")

        assert recorder.conversation_id == "new"
        assert recorder.invocations == []
        assert recorder.state == RecorderState.IDLE


class TestEditAgentMessage:
    def test_first_edit_snapshots_original(self):
        invocations = [make_invocation(agent_message="orig")]
        invocations[0].custom_original_agent_message = None

        edited = edit_agent_message(invocations, "inv_1", "edited")

        assert edited.agent_message == "edited"
        assert edited.custom_original_agent_message == "orig"

    def test_repeated_edits_keep_first_snapshot(self):
        invocations = [make_invocation(agent_message="orig")]

        edit_agent_message(invocations, "inv_1", "v1")
        edit_agent_message(invocations, "inv_1", "v2")

        assert invocations[0].agent_message == "v2"
        assert invocations[0].custom_original_agent_message == "orig"

    def test_empty_original_snapshot_is_kept(self):
        invocations = [
            make_invocation(agent_message="", custom_original_agent_message="")
        ]

        edit_agent_message(invocations, "inv_1", "first edit")
        edit_agent_message(invocations, "inv_1", "second edit")

        assert invocations[0].agent_message == "second edit"
        assert invocations[0].custom_original_agent_message == ""

    def test_tool_only_turn_keeps_empty_snapshot_across_edits(self):
        recorder = InvocationRecorder("conv")
        recorder.begin("Look it up")
        recorder.apply(ToolCallEvent(data=ToolCallData(id="c1", name="lookup")))
        recorder.apply(DoneEvent())

        [sealed] = recorder.invocations
        recorder.edit(sealed.invocation_id, "first edit")
        edited = recorder.edit(sealed.invocation_id, "second edit")

        assert edited.custom_original_agent_message == ""

    def test_unknown_invocation(self):
        with pytest.raises(NotFoundError):
            edit_agent_message([make_invocation()], "missing", "x")


class TestApplyFeedback:
    def test_partial_updates_are_independent(self):
        invocations = [make_invocation()]

        apply_feedback(invocations, "inv_1", rating=4)
        apply_feedback(invocations, "inv_1", feedback="Accurate")

        assert invocations[0].custom_rating == 4
        assert invocations[0].custom_feedback == "Accurate"

    def test_rating_overwritten(self):
        invocations = [make_invocation()]

        apply_feedback(invocations, "inv_1", rating=2)
        apply_feedback(invocations, "inv_1", rating=5)

        assert invocations[0].custom_rating == 5

    @pytest.mark.parametrize("rating", [0, 6, -1, True, 3.5, "4"])
    def test_invalid_rating_rejected(self, rating):
        invocations = [make_invocation()]

        with pytest.raises(ValidationError):
            apply_feedback(invocations, "inv_1", rating=rating)

        assert invocations[0].custom_rating is None

    def test_unknown_invocation(self):
        with pytest.raises(NotFoundError):
            apply_feedback([make_invocation()], "missing", feedback="x")

    def test_recorder_annotate(self):
        recorder = InvocationRecorder()
        recorder.begin("hi")
        recorder.apply(text("hello"))
        sealed = recorder.apply(DoneEvent())

        recorder.annotate(sealed.invocation_id, rating=3, feedback="fine")
        recorder.edit(sealed.invocation_id, "hello there")

        stored = recorder.invocations[0].to_storage()
        assert stored["_custom_rating"] == 3
        assert stored["_custom_feedback"] == "fine"
        assert stored["_custom_original_agent_message"] == "hello"
        assert stored["agent_message"] == "hello there"
