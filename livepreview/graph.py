"""
LangGraph implementation of one render cycle.

Implements a minimal state graph with nodes:
- transpile_node: Acquires the compiler and compiles the source
- execute_node: Runs the compiled code in the sandbox and renders it
"""

import logging
from typing import Literal, Optional

from langgraph.graph import StateGraph, END

from livepreview.errors import ComponentRuntimeError, LoadError, TranspileError
from livepreview.sandbox.executor import SandboxExecutor
from livepreview.state import RenderState
from livepreview.transpiler.babel import Transpiler


logger = logging.getLogger(__name__)


# =============================================================================
# ROUTING LOGIC
# =============================================================================

def after_transpile_route(state: RenderState) -> Literal["execute_node", "end"]:
    """After compiling, run the sandbox or end on error."""
    if state.get("error") or not state.get("compiled"):
        return "end"
    return "execute_node"


# =============================================================================
# BUILD THE GRAPH
# =============================================================================

def build_graph(
    transpiler: Optional[Transpiler] = None,
    executor: Optional[SandboxExecutor] = None,
) -> StateGraph:
    """Build the render graph around the given collaborators."""
    transpiler = transpiler or Transpiler()
    executor = executor or SandboxExecutor()

    async def transpile_node(state: RenderState) -> RenderState:
        """Compile the source; load and compile failures end the cycle."""
        try:
            state["compiled"] = await transpiler.transpile(
                state["source_code"],
                state.get("strip_inline_styles", False),
            )
        except (LoadError, TranspileError) as e:
            state["status"] = "error"
            state["error"] = str(e)
        return state

    def execute_node(state: RenderState) -> RenderState:
        """Execute the compiled artifact and keep the rendered preview."""
        try:
            state["preview"] = executor.execute(state["compiled"], state.get("properties") or {})
            state["status"] = "ready"
        except ComponentRuntimeError as e:
            state["status"] = "error"
            state["error"] = str(e)
        # The compiled artifact is not kept past the cycle
        state["compiled"] = None
        return state

    # Create the graph
    graph = StateGraph(RenderState)

    # Add nodes
    graph.add_node("transpile_node", transpile_node)
    graph.add_node("execute_node", execute_node)

    # Set entry point
    graph.set_entry_point("transpile_node")

    graph.add_conditional_edges(
        "transpile_node",
        after_transpile_route,
        {
            "execute_node": "execute_node",
            "end": END,
        }
    )

    # Terminal edge
    graph.add_edge("execute_node", END)

    return graph


def get_compiled_graph(
    transpiler: Optional[Transpiler] = None,
    executor: Optional[SandboxExecutor] = None,
):
    """Get the compiled graph ready for execution."""
    return build_graph(transpiler, executor).compile()
