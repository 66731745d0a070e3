from __future__ import annotations

import json

from campaign_studio.assembler import compile_prompt, parse_payload, serialize_payload


def test_flash_sale_payload() -> None:
    payload = compile_prompt("Flash sale 20% off, email and sms")

    assert payload.campaign_name.startswith("Flash Sale:")
    assert "(20% OFF)" in payload.campaign_name
    assert payload.offers_library[payload.offer].value == "20%"
    assert [step.channel for step in payload.workflow] == ["Email", "SMS"]
    assert payload.workflow[0].template_ref == "flashsale_email_v1"
    assert payload.workflow[1].template_ref == "winback_sms_v1"
    assert payload.workflow[1].requires_opt_in is True
    assert payload.workflow[0].requires_opt_in is None


def test_name_uses_selected_channels() -> None:
    payload = compile_prompt("flash sale", selected_channels=["Email", "SMS"])
    assert payload.campaign_name == "Flash Sale: Email + SMS"

    fallback = compile_prompt("flash sale")
    assert fallback.campaign_name == "Flash Sale: Multi-Channel"


def test_prompt_values_come_before_selected_values() -> None:
    payload = compile_prompt("email blast", selected_channels=["SMS", "Email"])

    assert [step.channel for step in payload.workflow] == ["Email", "SMS"]


def test_unknown_facets_are_ignored() -> None:
    payload = compile_prompt("weekly digest", ["Myspace"], ["Fax"])

    assert payload.data_sources == []
    assert payload.workflow == []
    assert payload.campaign_name == "Weekly digest"


def test_segments_follow_fixed_source_order() -> None:
    payload = compile_prompt("weekly digest", ["Google Ads Tag", "Shopify"])

    assert payload.data_sources == ["Google Ads Tag", "Shopify"]
    assert [s.source for s in payload.audience.segments] == ["Shopify", "Google Ads Tag"]
    assert payload.audience.segments[0].filter == "{{audience.lastPurchaseOverDays}}"
    assert payload.audience.segments[1].filter == "{{audience.cartAbandoned}}"


def test_generic_template_without_offer() -> None:
    payload = compile_prompt("weekly digest", selected_channels=["Email", "WhatsApp"])

    assert payload.offer is None
    assert payload.workflow[0].template_ref == "generic_email_v1"
    assert payload.workflow[1].template_ref == "cart_whatsapp_v1"
    assert payload.workflow[1].requires_opt_in is True


def test_ads_step_targets_ad_platforms() -> None:
    payload = compile_prompt("retarget cart abandoners with ads")
    ads = [step for step in payload.workflow if step.channel == "Ads"]

    assert len(ads) == 1
    assert ads[0].platforms == ["Facebook", "Google"]


def test_compliance_matches_workflow() -> None:
    for text, channels in [
        ("weekly digest", []),
        ("sms reminder", []),
        ("whatsapp and email", []),
        ("weekly digest", ["SMS", "WhatsApp"]),
    ]:
        payload = compile_prompt(text, selected_channels=channels)
        used = {step.channel for step in payload.workflow}
        assert payload.compliance.sms_opt_in_required == ("SMS" in used)
        assert payload.compliance.whatsapp_opt_in_required == ("WhatsApp" in used)


def test_limits_and_schedule() -> None:
    payload = compile_prompt("email and sms promo")

    assert payload.limits.max_messages_per_user == 3
    assert payload.limits.per_channel == {"Email": 2, "SMS": 1}
    schedule = payload.workflow[0].schedule
    assert schedule.datetime == "2025-09-30T10:00:00.000Z"
    assert schedule.local_time is True
    assert schedule.timezone == "customer_local"


def test_serialization_omits_absent_fields() -> None:
    text = serialize_payload(compile_prompt("weekly digest", selected_channels=["Email"]))
    data = json.loads(text)

    for key in ("offer", "offersLibrary", "experiment", "localization"):
        assert key not in data
    assert "requiresOptIn" not in data["workflow"][0]
    assert data["tracking"] == {
        "openRate": "{{trackOpen}}",
        "clickRate": "{{trackClick}}",
        "conversion": "{{trackConversion}}",
    }
    assert text.startswith('{\n  "campaignId": "campaign_')


def test_serialized_payload_parses_back() -> None:
    payload = compile_prompt("Flash sale 20% off, A/B test, US and MX, email and sms")

    assert parse_payload(serialize_payload(payload)) == payload


def test_campaign_ids_are_unique() -> None:
    ids = {compile_prompt("weekly digest").campaign_id for _ in range(20)}
    assert len(ids) == 20
