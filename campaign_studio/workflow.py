"""
LangGraph workflow builder for campaign compilation
"""

from langgraph.graph import StateGraph, END
from .models import CompileState
from .nodes import classify_prompt, assemble_payload, explain_payload


def build_workflow():
    """
    Build and compile the campaign compile workflow
    
    classify_prompt -> assemble_payload -> explain_payload
    
    Returns:
        Compiled workflow graph
    """
    workflow = StateGraph(CompileState)
    
    # Add nodes for the workflow
    workflow.add_node("classify_prompt", classify_prompt)
    workflow.add_node("assemble_payload", assemble_payload)
    workflow.add_node("explain_payload", explain_payload)
    
    # Set entry point
    workflow.set_entry_point("classify_prompt")
    
    # Add edges
    workflow.add_edge("classify_prompt", "assemble_payload")
    workflow.add_edge("assemble_payload", "explain_payload")
    workflow.add_edge("explain_payload", END)
    
    return workflow.compile()
