"""
MCP Server for Campaign Studio

Provides tools to compile campaign prompts into payloads and explain them.
"""

from typing import Optional
from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from campaign_studio.assembler import compile_prompt, serialize_payload
from campaign_studio.constants import validate_facets
from campaign_studio.explainer import explain
from campaign_studio.models import CampaignPayload

# Initialize MCP server
mcp = FastMCP("Campaign Studio")


@mcp.tool()
async def compile_campaign(
    prompt: str,
    data_sources: Optional[list[str]] = None,
    channels: Optional[list[str]] = None
) -> dict:
    """
    Compile a free-text campaign description into a structured campaign payload.
    
    Args:
        prompt: Campaign description (e.g., "Flash sale 20% off, email and sms")
        data_sources: Selected data sources (Shopify, Facebook Page, Google Ads Tag)
        channels: Selected channels (Email, SMS, WhatsApp, Ads)
    
    Returns:
        Dictionary with compiled payload or error information.
        On success: {"success": True, "data": {...}, "json": "...", "explanation": "...", "message": "..."}
        On error: {"error": "...", "message": "..."}
    """
    data_sources = data_sources or []
    channels = channels or []
    
    is_valid, invalid = validate_facets(data_sources, channels)
    if not is_valid:
        return {
            "error": "Invalid facets",
            "message": f"Unknown data sources or channels: {', '.join(invalid)}"
        }
    
    payload = compile_prompt(prompt, data_sources, channels)
    
    return {
        "success": True,
        "data": payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        "json": serialize_payload(payload),
        "explanation": explain(payload, prompt),
        "message": f"Compiled campaign '{payload.campaign_name}'"
    }


@mcp.tool()
async def explain_campaign(payload: dict, prompt: str) -> dict:
    """
    Generate the strategy explanation for an existing campaign payload.
    
    Args:
        payload: Campaign payload as returned by compile_campaign (camelCase keys)
        prompt: The campaign description the payload was compiled from
    
    Returns:
        On success: {"success": True, "explanation": "..."}
        On error: {"error": "...", "message": "..."}
    """
    try:
        campaign = CampaignPayload.model_validate(payload)
    except ValidationError as e:
        return {
            "error": "Invalid payload",
            "message": str(e)
        }
    
    return {
        "success": True,
        "explanation": explain(campaign, prompt)
    }


if __name__ == "__main__":
    # Run the MCP server
    mcp.run()
