from __future__ import annotations

from campaign_studio.rules import AB_TEST_EXPERIMENT, classify, match_name_rule


def test_flash_sale_with_percentage() -> None:
    attrs = classify("Flash sale 20% off, email and sms")

    assert attrs.name.label == "Flash Sale"
    assert attrs.name.suffix == " (20% OFF)"
    assert attrs.offer == "OFFER20"
    assert attrs.offers_library["OFFER20"].value == "20%"
    assert attrs.channels == ["Email", "SMS"]
    assert attrs.per_channel == {"Email": 2, "SMS": 1}


def test_vip_exclusive_access_gets_no_offer() -> None:
    attrs = classify("VIP exclusive access event")

    assert attrs.name.label == "VIP Early Access"
    assert attrs.name.channel_fallback == "Email Only"
    assert attrs.offer is None
    assert attrs.offers_library == {}
    assert attrs.data_sources == ["Shopify"]


def test_exclusive_access_suppresses_explicit_discounts() -> None:
    attrs = classify("Exclusive access for VIPs with a 30% discount, discount code: VIP30")

    assert attrs.offer is None
    assert attrs.offers_library == {}


def test_vip_without_exclusive_access_is_a_loyalty_reward() -> None:
    attrs = classify("Treat our VIP shoppers")

    assert attrs.name.label == "Loyalty Reward"
    assert attrs.offer == "REWARD10"
    assert attrs.offers_library["REWARD10"].value == "10%"


def test_loyalty_targets_use_first_two_percentages() -> None:
    attrs = classify("loyalty program, conversion 8%, click 3%, bonus 50%")

    assert attrs.success_criteria.conversion_rate_target == ">= 0.08"
    assert attrs.success_criteria.click_rate_target == ">= 0.03"


def test_explicit_rate_targets_apply_independently() -> None:
    both = classify("Spring newsletter, conversion rate >= 12% and click rate >= 4%")
    click_only = classify("Spring newsletter, click rate > 20%")

    assert both.success_criteria.conversion_rate_target == ">= 0.12"
    assert both.success_criteria.click_rate_target == ">= 0.04"
    assert click_only.success_criteria.conversion_rate_target == ">= 0.05"
    assert click_only.success_criteria.click_rate_target == ">= 0.2"


def test_unrecognized_text_gets_defaults() -> None:
    attrs = classify("  summer newsletter  ")

    assert attrs.name.label is None
    assert attrs.name.render([]) == "Summer newsletter"
    assert attrs.offer is None
    assert attrs.data_sources == []
    assert attrs.channels == []
    assert attrs.per_channel == {}
    assert attrs.experiment is None
    assert attrs.localization == []
    assert attrs.success_criteria.conversion_rate_target == ">= 0.05"
    assert attrs.success_criteria.click_rate_target == ">= 0.1"


def test_empty_text_is_a_custom_campaign() -> None:
    assert classify("").name.render(["Email"]) == "Custom Campaign"


def test_discount_code_combinations() -> None:
    code_and_value = classify("Flash sale 25% off, discount code: save25")
    code_only = classify("Winback email with discount code: COMEBACK")
    value_only = classify("Weekend promo 15% off")

    assert code_and_value.offer == "SAVE25"
    assert code_and_value.offers_library["SAVE25"].value == "25%"
    assert code_only.offer == "COMEBACK"
    assert code_only.offers_library["COMEBACK"].value == "10%"
    assert value_only.offer == "OFFER15"
    assert value_only.offers_library["OFFER15"].value == "15%"


def test_offer_keywords_without_offer_bearing_name() -> None:
    attrs = classify("Product launch reminder by email")

    assert attrs.name.label == "Product Launch"
    assert attrs.offer == "REWARD10"


def test_no_offer_for_plain_announcement() -> None:
    attrs = classify("Anniversary thank you email for loyal customers")

    assert attrs.name.label == "Anniversary Thank You"
    assert attrs.offer is None


def test_name_rule_priority() -> None:
    assert match_name_rule("winback flash sale").label == "Winback"
    assert match_name_rule("abandoned cart discount").label == "Cart Reminder"
    assert match_name_rule("re-engage lapsed buyers").label == "Re-engagement"
    assert match_name_rule("weekly digest") is None


def test_per_channel_frequency() -> None:
    assert classify("email only").per_channel == {"Email": 2}
    assert classify("sms blast").per_channel == {"SMS": 1}
    assert classify("whatsapp broadcast").per_channel == {}


def test_experiment_is_fixed() -> None:
    attrs = classify("Run an A/B test on the subject line")

    assert attrs.experiment == AB_TEST_EXPERIMENT
    assert attrs.experiment.split == 0.5


def test_localization_needs_both_whole_words() -> None:
    assert classify("Launch in US and MX").localization == ["US", "MX"]
    assert classify("Launch in US only").localization == []
    assert classify("discuss mixed bundles").localization == []


def test_retargeting_adds_ad_sources() -> None:
    retarget = classify("Retarget cart abandoners")
    reminder = classify("Cart reminder")

    assert retarget.name.label == "Cart Reminder"
    assert retarget.data_sources == ["Facebook Page", "Google Ads Tag"]
    assert reminder.data_sources == []


def test_classification_is_deterministic() -> None:
    text = "Flash sale 20% off for repeat customers, email and sms, discount code: SAVE20"
    assert classify(text) == classify(text)


def test_oversized_rate_figures_keep_default_targets() -> None:
    huge = "9" * 400
    enormous = "9" * 5000

    attrs = classify(f"conversion rate >= {huge}% and click rate >= 4%")
    assert attrs.success_criteria.conversion_rate_target == ">= 0.05"
    assert attrs.success_criteria.click_rate_target == ">= 0.04"

    attrs = classify(f"click rate > {enormous}%")
    assert attrs.success_criteria.click_rate_target == ">= 0.1"

    loyalty = classify(f"loyalty program, conversion 8%, click {huge}%")
    assert loyalty.success_criteria.conversion_rate_target == ">= 0.08"
    assert loyalty.success_criteria.click_rate_target == ">= 0.1"
