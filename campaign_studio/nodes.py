"""
Workflow nodes for campaign compilation
"""

from .assembler import assemble
from .explainer import explain
from .models import CompileState
from .rules import classify


def classify_prompt(state: CompileState) -> dict:
    """Classify the user prompt into campaign attributes"""
    print(f"\n[Classifying prompt...]")
    
    attributes = classify(state["user_prompt"])
    
    print(f"✓ Recognized: {len(attributes.channels)} channel(s), {len(attributes.data_sources)} data source(s)")
    if attributes.offer:
        print(f"  Offer: {attributes.offer}")
    
    return {
        "attributes": attributes,
        "current_step": "assemble_payload"
    }


def assemble_payload(state: CompileState) -> dict:
    """Merge recognized attributes with the selected facets into the campaign payload"""
    print(f"\n[Assembling payload...]")
    
    payload = assemble(
        state["attributes"],
        state.get("selected_data_sources", []),
        state.get("selected_channels", [])
    )
    
    print(f"✓ {payload.campaign_name} ({len(payload.workflow)} workflow step(s))")
    
    return {
        "payload": payload,
        "current_step": "explain_payload"
    }


def explain_payload(state: CompileState) -> dict:
    """Generate the strategy explanation for the assembled payload"""
    print(f"\n[Explaining payload...]")
    
    explanation = explain(state["payload"], state["user_prompt"])
    
    return {
        "explanation": explanation,
        "current_step": "completed"
    }
