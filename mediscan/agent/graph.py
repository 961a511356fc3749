# mediscan/agent/graph.py
from typing import Any, Dict, Optional

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.sqlite import SqliteSaver
from langgraph.graph import START, END, StateGraph

from mediscan.agent.state import ReminderSessionState
from mediscan.agent.nodes import (
    analyze_node, hydrate_node, edit_node, add_medicine_node, validate_node,
    permission_node, persist_node, close_node,
    route_after_analyze, route_after_edit, route_after_validate, route_after_permission,
)
from mediscan.db.db_config import get_sqlite_connection

def build_reminder_graph(checkpointer: BaseCheckpointSaver):
    builder = StateGraph(ReminderSessionState)

    builder.add_node("analyze", analyze_node)
    builder.add_node("hydrate", hydrate_node)
    builder.add_node("edit", edit_node)
    builder.add_node("add_medicine", add_medicine_node)
    builder.add_node("validate", validate_node)
    builder.add_node("permission", permission_node)
    builder.add_node("persist", persist_node)
    builder.add_node("close", close_node)

    builder.add_edge(START, "analyze")
    builder.add_conditional_edges("analyze", route_after_analyze, {
        "hydrate": "hydrate",
        "end": END,
    })
    builder.add_edge("hydrate", "edit")

    builder.add_conditional_edges("edit", route_after_edit, {
        "add_medicine": "add_medicine",
        "validate": "validate",
        "close": "close",
        "edit": "edit",
    })
    builder.add_edge("add_medicine", "hydrate")

    builder.add_conditional_edges("validate", route_after_validate, {
        "edit": "edit",
        "permission": "permission",
    })
    builder.add_conditional_edges("permission", route_after_permission, {
        "edit": "edit",
        "persist": "persist",
    })
    builder.add_edge("persist", "edit")
    builder.add_edge("close", END)

    return builder.compile(checkpointer=checkpointer)

reminder_graph = build_reminder_graph(SqliteSaver(get_sqlite_connection()))

def pending_interrupt(snap) -> Optional[Dict[str, Any]]:
    """Payload of the interrupt the session is paused on, or None."""
    interrupts = getattr(snap, "interrupts", None) or ()
    if not interrupts:
        interrupts = tuple(i for t in (snap.tasks or ()) for i in (getattr(t, "interrupts", None) or ()))
    if not interrupts:
        return None
    payload = interrupts[-1].value
    return payload if isinstance(payload, dict) else None
