"""
Explanation generator: derives a narrative rationale for a compiled payload

The narrative depends only on the payload and the original text, never on
the rule engine's internals, so the same inputs always give the same text.
"""

from typing import Optional
from dateutil import parser as date_parser

from .models import CampaignPayload
from .prompts import (
    AUDIENCE_DESCRIPTIONS,
    CHANNEL_RATIONALES,
    DEFAULT_AUDIENCE_DESCRIPTION,
    DEFAULT_CHANNEL_RATIONALE,
    DEFAULT_RECOMMENDATIONS,
    DEFAULT_TIMING_RATIONALE,
    EXPLANATION_TEMPLATE,
    OPT_IN_NOTES,
    RECOMMENDATIONS,
    TIMING_RATIONALES,
)


# Ordered by campaign type priority
INTENT_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Re-engagement", ("re-engage", "inactive", "haven't purchased", "lapsed", "winback", "churn", "dormant", "bring back")),
    ("Retention", ("retention", "loyalty", "keep", "maintain", "vip", "loyal")),
    ("Acquisition", ("new customer", "acquire", "attract", "prospect", "acquisition")),
    ("Seasonal", ("holiday", "seasonal", "christmas", "black friday", "season", "event")),
    ("Promotional", ("sale", "discount", "offer", "promotion", "deal", "special", "flash")),
]
GENERAL_INTENT = "General Marketing"

# Each narrative section reads the intents in its own priority order
AUDIENCE_PRIORITY = ["Re-engagement", "Acquisition", "Retention"]
TIMING_PRIORITY = ["Re-engagement", "Promotional", "Seasonal"]
RECOMMENDATION_PRIORITY = ["Re-engagement", "Promotional", "Seasonal"]
CHANNEL_PRIORITY = ["Email", "SMS", "WhatsApp"]


def detect_intents(text: str) -> set[str]:
    """Return every intent whose keywords appear in the text"""
    lowered = (text or "").lower()
    return {intent for intent, words in INTENT_RULES if any(word in lowered for word in words)}


def classify_intent(text: str) -> str:
    """Return the single highest-priority intent label for the text"""
    intents = detect_intents(text)
    for intent, _ in INTENT_RULES:
        if intent in intents:
            return intent
    return GENERAL_INTENT


def _first_present(priority: list[str], present) -> Optional[str]:
    for key in priority:
        if key in present:
            return key
    return None


def _format_schedule(value: str) -> str:
    """Render an ISO datetime as e.g. '9/30/2025, 10:00:00 AM'"""
    try:
        dt = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return value
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt.month}/{dt.day}/{dt.year}, {hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"


def explanation_slots(payload: CampaignPayload, original_text: str) -> dict[str, str]:
    """
    Bind the named slots of the explanation template from the payload

    Args:
        payload: Compiled campaign payload
        original_text: The user's campaign description

    Returns:
        Mapping of slot name to rendered value
    """
    intents = detect_intents(original_text)
    channels = [step.channel for step in payload.workflow]
    first_step = payload.workflow[0] if payload.workflow else None

    audience_key = _first_present(AUDIENCE_PRIORITY, intents)
    channel_key = _first_present(CHANNEL_PRIORITY, channels)
    timing_key = _first_present(TIMING_PRIORITY, intents)
    recommendation_key = _first_present(RECOMMENDATION_PRIORITY, intents)

    if first_step is not None and first_step.offer:
        incentive = f"An offer code **{first_step.offer}** has been incorporated to drive engagement."
    else:
        incentive = "No specific offer has been configured for this campaign."

    opt_in_notes = []
    if payload.compliance.sms_opt_in_required:
        opt_in_notes.append(OPT_IN_NOTES["SMS"])
    if payload.compliance.whatsapp_opt_in_required:
        opt_in_notes.append(OPT_IN_NOTES["WhatsApp"])

    recommendations = RECOMMENDATIONS.get(recommendation_key, DEFAULT_RECOMMENDATIONS)

    return {
        "original_text": original_text or "",
        "campaign_type": classify_intent(original_text).lower(),
        "data_source_list": " + ".join(payload.data_sources) or "selected",
        "data_source_plural": "s" if len(payload.data_sources) > 1 else "",
        "channel_list": " + ".join(channels) or "selected",
        "channel_plural": "s" if len(channels) > 1 else "",
        "campaign_id": payload.campaign_id,
        "campaign_name": payload.campaign_name,
        "audience_sources": ", ".join(payload.data_sources) or "selected data sources",
        "audience_description": AUDIENCE_DESCRIPTIONS.get(audience_key, DEFAULT_AUDIENCE_DESCRIPTION).lower(),
        "primary_channel": first_step.channel if first_step else "selected channel",
        "channel_rationale": CHANNEL_RATIONALES.get(channel_key, DEFAULT_CHANNEL_RATIONALE).lower(),
        "schedule": _format_schedule(first_step.schedule.datetime) if first_step else "immediate execution",
        "timing_rationale": TIMING_RATIONALES.get(timing_key, DEFAULT_TIMING_RATIONALE).lower(),
        "incentive": incentive,
        "conversion_target": payload.success_criteria.conversion_rate_target,
        "click_target": payload.success_criteria.click_rate_target,
        "max_messages": str(payload.limits.max_messages_per_user),
        "opt_in_note": "".join(f" {note}." for note in opt_in_notes),
        "recommendations": "\n".join(f"{i}. {rec}" for i, rec in enumerate(recommendations, 1)),
    }


def explain(payload: CampaignPayload, original_text: str) -> str:
    """Generate the strategy narrative for a payload"""
    return EXPLANATION_TEMPLATE.format(**explanation_slots(payload, original_text))
