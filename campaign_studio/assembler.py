"""
Payload assembler: turns classified attributes plus the user's facet
selection into the final campaign payload
"""

import json
from typing import Iterable

from .constants.facets import (
    AD_PLATFORMS,
    CHANNEL_TEMPLATE_REFS,
    GENERIC_TEMPLATE_REF,
    MAX_MESSAGES_PER_USER,
    OFFER_TEMPLATE_REF,
    OPT_IN_CHANNELS,
    SOURCE_FILTERS,
    VALID_CHANNELS,
    VALID_DATA_SOURCES,
)
from .models import (
    AttributeSet,
    Audience,
    AudienceSegment,
    CampaignPayload,
    Compliance,
    Limits,
    Schedule,
    WorkflowStep,
)
from .rules import classify
from .utils.ids import new_campaign_id


def _merge(prompt_values: Iterable[str], selected: Iterable[str], valid: list[str]) -> list[str]:
    # dict keeps insertion order, prompt-derived values first
    merged = dict.fromkeys(v for v in prompt_values if v in valid)
    merged.update(dict.fromkeys(v for v in selected if v in valid))
    return list(merged)


def _workflow_step(channel: str, offer: str | None, schedule: Schedule) -> WorkflowStep:
    template_ref = OFFER_TEMPLATE_REF if offer else GENERIC_TEMPLATE_REF
    return WorkflowStep(
        channel=channel,
        template_ref=CHANNEL_TEMPLATE_REFS.get(channel, template_ref),
        schedule=schedule,
        offer=offer,
        requires_opt_in=True if channel in OPT_IN_CHANNELS else None,
        platforms=list(AD_PLATFORMS) if channel == "Ads" else None,
    )


def assemble(
    attrs: AttributeSet,
    selected_sources: Iterable[str] = (),
    selected_channels: Iterable[str] = (),
) -> CampaignPayload:
    """
    Build the campaign payload from classified attributes and selected facets.

    Unknown facet values are ignored, so every combination of inputs produces
    a payload.

    Args:
        attrs: Output of the rule engine
        selected_sources: Data sources picked by the user
        selected_channels: Channels picked by the user

    Returns:
        Immutable CampaignPayload
    """
    selected_sources = list(selected_sources)
    selected_channels = [c for c in dict.fromkeys(selected_channels) if c in VALID_CHANNELS]

    data_sources = _merge(attrs.data_sources, selected_sources, VALID_DATA_SOURCES)
    channels = _merge(attrs.channels, selected_channels, VALID_CHANNELS)

    schedule = Schedule()
    workflow = [_workflow_step(channel, attrs.offer, schedule) for channel in channels]

    segments = [
        AudienceSegment(source=source, filter=SOURCE_FILTERS[source])
        for source in VALID_DATA_SOURCES
        if source in data_sources
    ]

    return CampaignPayload(
        campaign_id=new_campaign_id(),
        campaign_name=attrs.name.render(selected_channels),
        audience=Audience(segments=segments),
        workflow=workflow,
        data_sources=data_sources,
        success_criteria=attrs.success_criteria,
        compliance=Compliance(
            sms_opt_in_required="SMS" in channels,
            whatsapp_opt_in_required="WhatsApp" in channels,
        ),
        limits=Limits(max_messages_per_user=MAX_MESSAGES_PER_USER, per_channel=dict(attrs.per_channel)),
        offer=attrs.offer,
        offers_library=dict(attrs.offers_library) or None,
        experiment=attrs.experiment,
        localization=list(attrs.localization) or None,
    )


def compile_prompt(
    text: str,
    selected_sources: Iterable[str] = (),
    selected_channels: Iterable[str] = (),
) -> CampaignPayload:
    """Classify text and assemble it with the selected facets in one step"""
    return assemble(classify(text), selected_sources, selected_channels)


def serialize_payload(payload: CampaignPayload) -> str:
    """Render the payload as 2-space indented JSON; absent optional fields are omitted"""
    data = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def parse_payload(text: str) -> CampaignPayload:
    """Parse serialized payload text back into a CampaignPayload"""
    return CampaignPayload.model_validate_json(text)
