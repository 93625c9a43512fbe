# graph/graph.py
from langgraph.graph import StateGraph, END
from graph.state import WorkdayState


def route_after_gate(state: WorkdayState) -> str:
    if state["action_taken"] == "error":
        return "notify"
    return "apply_action"


def route_after_apply(state: WorkdayState) -> str:
    if state["action_taken"] == "error":
        return "notify"
    return "duration"


def build_graph(workday_store=None, notifier=None):
    """勤怠操作のLangGraphグラフを構築して返す

    各ノード関数はサービス依存を持つため、functools.partialでラップして
    LangGraphが期待する (state) -> dict シグネチャに合わせる。
    """
    from functools import partial
    from graph.nodes.transition_gate_node import transition_gate_node
    from graph.nodes.apply_action_node import apply_action_node
    from graph.nodes.duration_node import duration_node
    from graph.nodes.notify_node import notify_node

    apply_wrapped = partial(apply_action_node, workday_store=workday_store)
    notify_wrapped = partial(notify_node, notifier=notifier)

    workflow = StateGraph(WorkdayState)

    workflow.add_node("transition_gate", transition_gate_node)
    workflow.add_node("apply_action", apply_wrapped)
    workflow.add_node("duration", duration_node)
    workflow.add_node("notify", notify_wrapped)

    workflow.set_entry_point("transition_gate")

    workflow.add_conditional_edges(
        "transition_gate",
        route_after_gate,
        {"apply_action": "apply_action", "notify": "notify"},
    )
    workflow.add_conditional_edges(
        "apply_action",
        route_after_apply,
        {"duration": "duration", "notify": "notify"},
    )

    workflow.add_edge("duration", "notify")
    workflow.add_edge("notify", END)

    return workflow.compile()
