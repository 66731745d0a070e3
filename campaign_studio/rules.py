"""
Rule engine for campaign prompts

Deterministic keyword/regex classification of free text into campaign
attributes. Every decision is an ordered rule table evaluated top to bottom;
the first matching rule wins.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .models import AttributeSet, CampaignName, Experiment, Offer, SuccessCriteria


PERCENT_PATTERN = re.compile(r"(\d{1,2})%")
TARGET_PERCENT_PATTERN = re.compile(r"(\d+)%")
DISCOUNT_CODE_PATTERN = re.compile(r"discount code\s*:?\s*([a-z0-9]+)", re.IGNORECASE)
CONVERSION_RATE_PATTERN = re.compile(r"conversion rate\s*>=?\s*(\d+)%")
CLICK_RATE_PATTERN = re.compile(r"click rate\s*>=?\s*(\d+)%")
US_TOKEN_PATTERN = re.compile(r"\bus\b")
MX_TOKEN_PATTERN = re.compile(r"\bmx\b")

DEFAULT_OFFER_CODE = "REWARD10"
DEFAULT_OFFER_VALUE = "10%"
FALLBACK_CAMPAIGN_NAME = "Custom Campaign"

AB_TEST_EXPERIMENT = Experiment(
    variant_a="flashsale_email_v1",
    variant_b="flashsale_email_v2",
    split=0.5,
)


def _keywords(*words: str) -> Callable[[str], bool]:
    return lambda text: any(word in text for word in words)


def _vip_without_exclusive_access(text: str) -> bool:
    return "vip" in text and "exclusive access" not in text


def _percent_off(text: str) -> str:
    match = PERCENT_PATTERN.search(text)
    return f" ({match.group(1)}% OFF)" if match else ""


@dataclass(frozen=True)
class NameRule:
    """A campaign name class and the predicate that selects it"""

    label: str
    matches: Callable[[str], bool]
    channel_fallback: str = "Multi-Channel"
    # Campaigns of this class get a default offer when none is given
    offer_bearing: bool = False
    suffix: Optional[Callable[[str], str]] = None


NAME_RULES: list[NameRule] = [
    NameRule("Anniversary Thank You", _keywords("anniversary", "thank you")),
    NameRule("Winback", _keywords("winback", "win back")),
    NameRule("Product Launch", _keywords("product launch", "new product")),
    NameRule(
        "Loyalty Reward",
        lambda text: _keywords("loyalty", "vip offer")(text) or _vip_without_exclusive_access(text),
        offer_bearing=True,
    ),
    NameRule("Cart Reminder", _keywords("cart", "retarget", "abandon"), offer_bearing=True),
    NameRule("Flash Sale", _keywords("flash sale", "discount"), offer_bearing=True, suffix=_percent_off),
    NameRule(
        "VIP Early Access",
        lambda text: "exclusive access" in text or ("vip" in text and "exclusive" in text),
        channel_fallback="Email Only",
    ),
    NameRule("Re-engagement", _keywords("re-engage", "reengage", "re-engagement"), offer_bearing=True),
]

# Text that asks for an incentive regardless of its name class
OFFER_KEYWORD_RULES: list[Callable[[str], bool]] = [
    _keywords("discount", "reminder", "loyalty"),
    _vip_without_exclusive_access,
]

SOURCE_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("Shopify", _keywords("shopify", "vip", "repeat customers")),
    ("Facebook Page", _keywords("facebook")),
    ("Google Ads Tag", _keywords("google")),
]

RETARGETING_SOURCES = ["Facebook Page", "Google Ads Tag"]

CHANNEL_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("Email", _keywords("email")),
    ("SMS", _keywords("sms")),
    ("WhatsApp", _keywords("whatsapp")),
    ("Ads", _keywords("ads")),
]

FREQUENCY_RULES: list[tuple[Callable[[str], bool], dict[str, int]]] = [
    (lambda text: "email" in text and "sms" in text, {"Email": 2, "SMS": 1}),
    (_keywords("email"), {"Email": 2}),
    (_keywords("sms"), {"SMS": 1}),
]


def match_name_rule(text: str) -> Optional[NameRule]:
    """Return the highest-priority name rule matching lower-cased text, if any"""
    for rule in NAME_RULES:
        if rule.matches(text):
            return rule
    return None


def _campaign_name(original: str, text: str, rule: Optional[NameRule]) -> CampaignName:
    if rule is None:
        stripped = original.strip()
        literal = stripped[0].upper() + stripped[1:] if stripped else FALLBACK_CAMPAIGN_NAME
        return CampaignName(literal=literal)
    return CampaignName(
        label=rule.label,
        channel_fallback=rule.channel_fallback,
        suffix=rule.suffix(text) if rule.suffix else "",
    )


def _is_offer_bearing(text: str, rule: Optional[NameRule]) -> bool:
    if rule is not None and rule.offer_bearing:
        return True
    return any(matches(text) for matches in OFFER_KEYWORD_RULES)


def _extract_offer(text: str, rule: Optional[NameRule]) -> tuple[Optional[str], dict[str, Offer]]:
    # Exclusive access campaigns are never discounted
    if "exclusive access" in text:
        return None, {}

    code_match = DISCOUNT_CODE_PATTERN.search(text)
    percent_match = PERCENT_PATTERN.search(text)
    code = code_match.group(1).upper() if code_match else None
    value = f"{percent_match.group(1)}%" if percent_match else None

    if code is None and value is None:
        if not _is_offer_bearing(text, rule):
            return None, {}
        code, value = DEFAULT_OFFER_CODE, DEFAULT_OFFER_VALUE
    elif code is None:
        code = f"OFFER{percent_match.group(1)}"

    value = value or DEFAULT_OFFER_VALUE
    return code, {code: Offer(code=code, value=value)}


def _data_sources(text: str, rule: Optional[NameRule]) -> list[str]:
    sources = [source for source, matches in SOURCE_RULES if matches(text)]
    if rule is not None and rule.label == "Cart Reminder" and "retarget" in text:
        sources += [s for s in RETARGETING_SOURCES if s not in sources]
    return sources


def _format_target(figure: str) -> Optional[str]:
    """Render a percentage figure as '>= ratio'; None when it cannot be a rate"""
    try:
        ratio = int(figure) / 100
    except (OverflowError, ValueError):
        # int() rejects huge digit strings, float division overflows on large ones
        return None
    return f">= {int(ratio) if ratio.is_integer() else ratio}"


def _targets(conversion: Optional[str], click: Optional[str]) -> SuccessCriteria:
    overrides = {}
    if conversion is not None and (target := _format_target(conversion)):
        overrides["conversion_rate_target"] = target
    if click is not None and (target := _format_target(click)):
        overrides["click_rate_target"] = target
    return SuccessCriteria(**overrides)


def _success_criteria(text: str) -> SuccessCriteria:
    if "loyalty" in text:
        figures = TARGET_PERCENT_PATTERN.findall(text)
        # Only the first two figures are significant
        if len(figures) >= 2:
            return _targets(figures[0], figures[1])

    conversion = CONVERSION_RATE_PATTERN.search(text)
    click = CLICK_RATE_PATTERN.search(text)
    return _targets(
        conversion.group(1) if conversion else None,
        click.group(1) if click else None,
    )


def _per_channel_frequency(text: str) -> dict[str, int]:
    for matches, frequency in FREQUENCY_RULES:
        if matches(text):
            return dict(frequency)
    return {}


def classify(text: str) -> AttributeSet:
    """
    Classify free text into campaign attributes.

    Pure and total: any string (including an empty one) yields an attribute
    set. Unrecognized text gets a generic name, no offer, no data sources and
    the default success targets.

    Args:
        text: Campaign description as typed by the user

    Returns:
        AttributeSet with everything recognized in the text
    """
    original = text or ""
    lowered = original.lower()

    rule = match_name_rule(lowered)
    offer, offers_library = _extract_offer(lowered, rule)

    return AttributeSet(
        name=_campaign_name(original, lowered, rule),
        offer=offer,
        offers_library=offers_library,
        data_sources=_data_sources(lowered, rule),
        channels=[channel for channel, matches in CHANNEL_RULES if matches(lowered)],
        success_criteria=_success_criteria(lowered),
        per_channel=_per_channel_frequency(lowered),
        experiment=AB_TEST_EXPERIMENT if ("a/b test" in lowered or "experiment" in lowered) else None,
        localization=["US", "MX"] if (US_TOKEN_PATTERN.search(lowered) and MX_TOKEN_PATTERN.search(lowered)) else [],
    )
