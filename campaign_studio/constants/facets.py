"""
Valid facets (data sources and channels) and their fixed per-facet settings
"""

VALID_DATA_SOURCES = [
    "Shopify",
    "Facebook Page",
    "Google Ads Tag",
]

VALID_CHANNELS = [
    "Email",
    "SMS",
    "WhatsApp",
    "Ads",
]

# Audience filter template per data source
SOURCE_FILTERS = {
    "Shopify": "{{audience.lastPurchaseOverDays}}",
    "Facebook Page": "{{audience.clickedLast30d}}",
    "Google Ads Tag": "{{audience.cartAbandoned}}",
}

# Template references per channel; channels not listed use the offer/generic email template
OFFER_TEMPLATE_REF = "flashsale_email_v1"
GENERIC_TEMPLATE_REF = "generic_email_v1"
CHANNEL_TEMPLATE_REFS = {
    "SMS": "winback_sms_v1",
    "WhatsApp": "cart_whatsapp_v1",
}

OPT_IN_CHANNELS = {"SMS", "WhatsApp"}
AD_PLATFORMS = ["Facebook", "Google"]

MAX_MESSAGES_PER_USER = 3


def validate_facets(data_sources: list[str], channels: list[str]) -> tuple[bool, list[str]]:
    """
    Validate that every selected data source and channel is known
    
    Args:
        data_sources: Selected data source names
        channels: Selected channel names
    
    Returns:
        Tuple of (is_valid, list_of_invalid_values)
    """
    invalid = [s for s in data_sources if s not in VALID_DATA_SOURCES]
    invalid += [c for c in channels if c not in VALID_CHANNELS]
    return len(invalid) == 0, invalid


def get_facets_list() -> str:
    """
    Get a formatted string of the valid facets for help output
    
    Returns:
        Formatted string listing data sources and channels
    """
    lines = ["Data sources:"]
    lines += [f"  - {s}" for s in VALID_DATA_SOURCES]
    lines.append("Channels:")
    lines += [f"  - {c}" for c in VALID_CHANNELS]
    return "\n".join(lines)
