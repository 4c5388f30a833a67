"""
Evaluation set export.

Converts saved Invocations into the evalset document consumed by evaluation
tooling: one eval case per invocation, tool calls re-expressed as
intermediate invocation events.
"""

from datetime import date
from typing import Iterable

from .models import (
    Content,
    EvalCase,
    EvalSet,
    EvalTurn,
    IntermediateData,
    Invocation,
    InvocationEvent,
    ToolCallRecord,
    short_id,
)

DEFAULT_TOOL_AUTHOR = "agent"


def tool_calls_for(invocation: Invocation) -> list[ToolCallRecord]:
    """Tool calls of an invocation, rebuilt from its timeline if needed."""
    if invocation.tool_calls:
        return invocation.tool_calls

    records: list[ToolCallRecord] = []
    by_id: dict[str, ToolCallRecord] = {}
    for event in invocation.events:
        data = event.get("data") or {}
        if event.get("type") == "tool_call":
            record = ToolCallRecord(name=data.get("name", ""), args=data.get("args"))
            records.append(record)
            if data.get("id"):
                by_id[data["id"]] = record
        elif event.get("type") == "tool_result":
            record = by_id.get(data.get("id", ""))
            if record is not None:
                record.result = data.get("result")
    return records


def _invocation_events(invocation: Invocation) -> list[InvocationEvent]:
    author = invocation.author or DEFAULT_TOOL_AUTHOR
    events: list[InvocationEvent] = []
    for index, call in enumerate(tool_calls_for(invocation)):
        tool_id = f"tool-{index}"
        events.append(
            InvocationEvent(
                author=author,
                content=Content(
                    parts=[
                        {"function_call": {"id": tool_id, "name": call.name, "args": call.args}}
                    ],
                    role="model",
                ),
            )
        )
        if call.result is not None:
            events.append(
                InvocationEvent(
                    author=author,
                    content=Content(
                        parts=[
                            {
                                "function_response": {
                                    "id": tool_id,
                                    "name": call.name,
                                    "response": call.result,
                                }
                            }
                        ],
                        role="user",
                    ),
                )
            )
    return events


def invocation_to_turn(invocation: Invocation) -> EvalTurn:
    """Express one invocation as a conversational turn."""
    events = _invocation_events(invocation)
    return EvalTurn(
        invocation_id=invocation.invocation_id,
        user_content=Content(parts=[{"text": invocation.user_message}], role="user"),
        final_response=Content(parts=[{"text": invocation.agent_message}], role="model"),
        intermediate_data=IntermediateData(invocation_events=events) if events else None,
        custom_rating=invocation.custom_rating,
        custom_feedback=invocation.custom_feedback or None,
        custom_original_agent_message=invocation.custom_original_agent_message or None,
    )


def build_evalset(
    conversations: Iterable[list[Invocation]],
    name: str | None = None,
) -> EvalSet:
    """
    Build an evalset with one case per invocation.

    Args:
        conversations: Invocation lists, one per conversation
        name: Set name; defaults to export_<today>

    Returns:
        The evalset; only its generated IDs are random
    """
    cases = [
        EvalCase(eval_id=f"case_{short_id()}", conversation=[invocation_to_turn(invocation)])
        for invocations in conversations
        for invocation in invocations
    ]
    return EvalSet(
        eval_set_id=f"evalset_{short_id()}",
        name=name or f"export_{date.today().isoformat()}",
        eval_cases=cases,
    )
