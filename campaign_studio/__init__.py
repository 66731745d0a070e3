"""
Campaign Studio Package

Compiles free-text campaign descriptions into structured payloads and plays
them back as resumable streams.
"""

from .assembler import assemble, compile_prompt, parse_payload, serialize_payload
from .campaign_compiler import CampaignCompiler
from .explainer import explain
from .models import AttributeSet, CampaignPayload, Checkpoint, ChatMessage, CompileState
from .rules import classify

__all__ = [
    "assemble",
    "classify",
    "compile_prompt",
    "explain",
    "parse_payload",
    "serialize_payload",
    "CampaignCompiler",
    "AttributeSet",
    "CampaignPayload",
    "Checkpoint",
    "ChatMessage",
    "CompileState",
]
