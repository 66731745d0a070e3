"""
Narrative templates for the campaign explanation
"""

from langchain_core.prompts import PromptTemplate


# Strategy analysis streamed after the payload
EXPLANATION_TEMPLATE = PromptTemplate.from_template("""📊 **Campaign Analysis**

You requested: "{original_text}"

This is a **{campaign_type}** campaign using **{data_source_list}** data source{data_source_plural} with **{channel_list}** communication channel{channel_plural}.

🎯 **Campaign Details**
• Campaign ID: {campaign_id}
• Campaign Name: {campaign_name}

👥 **Audience Strategy**
Audience targeting leverages **{audience_sources}** to reach {audience_description}.

🚀 **Execution Approach**
The execution strategy centers on **{primary_channel}**, {channel_rationale}.

⏰ **Timing & Scheduling**
Timing is set for **{schedule}**, {timing_rationale}.

💰 **Incentive Structure**
{incentive}

📈 **Performance Objectives**
Success will be measured against **conversion targets of {conversion_target}** and **click rate targets of {click_target}**. Comprehensive tracking includes open rates, click rates, and conversions.

⚖️ **Compliance Framework**
Compliance measures include a maximum of **{max_messages} messages per user** to maintain deliverability standards.{opt_in_note}

💡 **Strategic Recommendations**
{recommendations}""")


AUDIENCE_DESCRIPTIONS = {
    "Re-engagement": "Customers who haven't engaged recently, identified through purchase behavior analysis",
    "Acquisition": "Potential new customers matching your ideal profile characteristics",
    "Retention": "Existing valuable customers to maintain engagement and loyalty",
}
DEFAULT_AUDIENCE_DESCRIPTION = "Targeted audience based on your specified criteria"

CHANNEL_RATIONALES = {
    "Email": "Email chosen for detailed messaging and personalized communication",
    "SMS": "SMS selected for immediate, high-impact notifications",
    "WhatsApp": "WhatsApp chosen for conversational, personal touchpoints",
}
DEFAULT_CHANNEL_RATIONALE = "Selected for optimal reach and engagement based on your audience"

TIMING_RATIONALES = {
    "Re-engagement": "Timed to catch customers when they're most likely to reconsider engagement",
    "Promotional": "Scheduled during peak shopping periods for maximum impact",
    "Seasonal": "Aligned with seasonal shopping patterns and calendar events",
}
DEFAULT_TIMING_RATIONALE = "Scheduled for optimal audience availability"

RECOMMENDATIONS = {
    "Re-engagement": [
        "Start with low-frequency messaging to avoid overwhelming inactive users",
        "Monitor re-engagement rates closely and adjust messaging based on response",
        "Consider progressive incentives starting with simple re-engagement offers",
        "Track long-term behavior changes beyond initial re-engagement metrics",
    ],
    "Promotional": [
        "Track conversion rates and adjust offer value based on performance",
        "Consider A/B testing different incentives and messaging approaches",
        "Monitor inventory levels and adjust campaign pacing accordingly",
        "Analyze customer segments that respond best to promotional offers",
    ],
    "Seasonal": [
        "Time sensitivity is critical - monitor inventory levels and adjust messaging",
        "Consider pre-season teaser campaigns to build anticipation",
        "Track seasonal conversion patterns for future campaign optimization",
        "Plan post-season follow-up campaigns to maintain momentum",
    ],
}
DEFAULT_RECOMMENDATIONS = [
    "Test with a small audience segment first, then scale based on performance",
    "Monitor engagement rates closely and adjust targeting parameters",
    "Consider A/B testing different messaging approaches",
    "Track ROI and optimize campaign elements based on data insights",
]

OPT_IN_NOTES = {
    "SMS": "SMS messages are only sent to contacts with recorded opt-in consent",
    "WhatsApp": "WhatsApp messages are only sent to contacts with recorded opt-in consent",
}
