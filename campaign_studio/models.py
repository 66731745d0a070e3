"""
Data models and state definitions for campaign compilation and playback
"""

from typing import Literal, Optional, TypedDict
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


DataSource = Literal["Shopify", "Facebook Page", "Google Ads Tag"]
Channel = Literal["Email", "SMS", "WhatsApp", "Ads"]


class PayloadModel(BaseModel):
    """Base for everything that ends up in the serialized payload (camelCase on the wire)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AudienceSegment(PayloadModel):
    source: DataSource
    filter: str


class Audience(PayloadModel):
    segments: list[AudienceSegment] = Field(default_factory=list)


class Schedule(PayloadModel):
    datetime: str = "2025-09-30T10:00:00.000Z"
    local_time: bool = True
    timezone: str = "customer_local"


class WorkflowStep(PayloadModel):
    channel: Channel
    template_ref: str
    schedule: Schedule = Field(default_factory=Schedule)
    offer: Optional[str] = None
    requires_opt_in: Optional[bool] = None
    platforms: Optional[list[str]] = None


class Tracking(PayloadModel):
    open_rate: str = "{{trackOpen}}"
    click_rate: str = "{{trackClick}}"
    conversion: str = "{{trackConversion}}"


class SuccessCriteria(PayloadModel):
    conversion_rate_target: str = ">= 0.05"
    click_rate_target: str = ">= 0.1"


class Compliance(PayloadModel):
    sms_opt_in_required: bool = False
    whatsapp_opt_in_required: bool = False


class Limits(PayloadModel):
    max_messages_per_user: int = 3
    per_channel: dict[str, int] = Field(default_factory=dict)


class Offer(PayloadModel):
    code: str
    value: str


class Experiment(PayloadModel):
    variant_a: str
    variant_b: str
    split: float


class CampaignPayload(PayloadModel):
    """The compiled campaign payload"""
    campaign_id: str
    campaign_name: str
    audience: Audience
    workflow: list[WorkflowStep]
    data_sources: list[DataSource]
    tracking: Tracking = Field(default_factory=Tracking)
    success_criteria: SuccessCriteria = Field(default_factory=SuccessCriteria)
    compliance: Compliance
    limits: Limits = Field(default_factory=Limits)
    offer: Optional[str] = None
    offers_library: Optional[dict[str, Offer]] = None
    experiment: Optional[Experiment] = None
    localization: Optional[list[str]] = None


class CampaignName(BaseModel):
    """
    Campaign name as recognized by the rule engine.

    The channel part of a rule-based name depends on the user's channel
    selection, so rendering is deferred to the assembler.
    """
    model_config = ConfigDict(frozen=True)

    label: Optional[str] = Field(default=None, description="Name rule label, e.g. 'Flash Sale'")
    channel_fallback: str = Field(default="Multi-Channel", description="Used when no channels are selected")
    suffix: str = Field(default="", description="Trailing detail, e.g. ' (20% OFF)'")
    literal: str = Field(default="Custom Campaign", description="Full name when no rule matched")

    def render(self, selected_channels: list[str]) -> str:
        if self.label is None:
            return self.literal
        channel_label = " + ".join(selected_channels) or self.channel_fallback
        return f"{self.label}: {channel_label}{self.suffix}"


class AttributeSet(BaseModel):
    """Campaign attributes recognized in free text"""
    model_config = ConfigDict(frozen=True)

    name: CampaignName = Field(default_factory=CampaignName)
    offer: Optional[str] = None
    offers_library: dict[str, Offer] = Field(default_factory=dict)
    data_sources: list[DataSource] = Field(default_factory=list)
    channels: list[Channel] = Field(default_factory=list)
    success_criteria: SuccessCriteria = Field(default_factory=SuccessCriteria)
    per_channel: dict[str, int] = Field(default_factory=dict)
    experiment: Optional[Experiment] = None
    localization: list[str] = Field(default_factory=list)


class Checkpoint(PayloadModel):
    """Everything needed to resume an interrupted playback"""
    byte_index_in_json: int = Field(default=0, ge=0)
    byte_index_in_explanation: int = Field(default=0, ge=0)
    partial_json_text: str = ""
    partial_explanation_text: str = ""
    stream_token: str
    explanation_token: str = ""
    payload: CampaignPayload
    original_input: str

    @model_validator(mode="after")
    def check_offsets(self) -> "Checkpoint":
        # Offsets count the characters already shown
        if len(self.partial_json_text) != self.byte_index_in_json:
            raise ValueError("partialJsonText does not end at byteIndexInJson")
        if len(self.partial_explanation_text) != self.byte_index_in_explanation:
            raise ValueError("partialExplanationText does not end at byteIndexInExplanation")
        if self.byte_index_in_explanation and not self.explanation_token:
            raise ValueError("explanation progress without an explanationToken")
        return self


class ChatMessage(PayloadModel):
    id: str
    role: Literal["user", "system"]
    content: str
    timestamp: str
    streaming: bool = False


class CompileState(TypedDict):
    """State for the campaign compile workflow"""
    user_prompt: str
    selected_data_sources: list[str]
    selected_channels: list[str]
    attributes: Optional[AttributeSet]
    payload: Optional[CampaignPayload]
    explanation: str
    current_step: str
