"""Tests for discovery-driven and default-starter recommendations."""
from app.schemas.discovery import BusinessContext, DiscoverySelection
from app.schemas.recommendation import (
    ConfidenceLevel,
    DefaultStarterReason,
    PaddingReason,
    RecommendationMode,
    TriggeredReason,
    WarningKind,
)
from app.services.recommendation_engine import (
    aggregate_candidates,
    default_starter_ids,
    generate_recommendations,
    group_modules_by_group,
)


def _ids(modules):
    return [m.module_id for m in modules]


def _by_id(modules):
    return {m.module_id: m for m in modules}


def test_empty_selection_returns_industry_starters(catalog):
    """Empty selection for retail: retail starters, their siblings, one no-selection warning."""
    result = generate_recommendations(DiscoverySelection(industry_id="retail"), catalog=catalog)

    assert result.mode == RecommendationMode.DEFAULT_STARTER_SET
    assert _ids(result.recommended_modules) == ["1.3", "2.1", "2.3", "4.2"]
    for module in result.recommended_modules:
        assert isinstance(module.why_suggested, DefaultStarterReason)
        assert module.why_suggested.industry_name == "retail"

    assert _ids(result.also_relevant) == [
        "1.1", "1.2", "1.4", "1.5", "1.6",
        "2.2", "2.4",
        "4.1", "4.3", "4.4", "4.5", "4.6", "4.7",
    ]
    assert all(isinstance(m.why_suggested, PaddingReason) for m in result.also_relevant)
    assert [w.kind for w in result.warnings] == [WarningKind.NO_SELECTION]
    assert "haven't selected any touchpoints" in result.reasoning
    assert "for retail" in result.reasoning


def test_single_touchpoint_triggers_mapped_modules(catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"finding-online"}, industry_id="other")
    result = generate_recommendations(selection, catalog=catalog)

    assert result.mode == RecommendationMode.DISCOVERY_DRIVEN
    assert result.warnings == []
    assert _ids(result.recommended_modules) == ["1.1", "1.2", "1.4", "1.5", "2.1", "4.2"]

    modules = _by_id(result.recommended_modules)
    for module_id in ["1.1", "1.2", "1.4", "1.5"]:
        reason = modules[module_id].why_suggested
        assert isinstance(reason, TriggeredReason)
        assert reason.type == "triggered"
        assert reason.triggering_touchpoint_ids == ["finding-online"]
        assert reason.triggering_question_texts == ["Finding information online"]

    # Generic starters fill in, without an industry name
    for module_id in ["2.1", "4.2"]:
        reason = modules[module_id].why_suggested
        assert isinstance(reason, DefaultStarterReason)
        assert reason.industry_name is None

    assert "before they arrive" in result.reasoning


def test_modules_ordered_by_trigger_count_then_catalog_order(catalog):
    selection = DiscoverySelection(
        selected_touchpoint_ids={"finding-online", "costs-policies", "booking"},
    )
    result = generate_recommendations(selection, catalog=catalog)

    assert _ids(result.recommended_modules) == [
        "4.3", "1.1", "1.2", "1.3", "1.4", "1.5", "3.5", "2.1", "4.2",
    ]
    reason = _by_id(result.recommended_modules)["4.3"].why_suggested
    assert reason.triggering_touchpoint_ids == ["costs-policies", "booking"]
    assert reason.triggering_question_texts == [
        "Understanding costs and policies",
        "Booking or registering",
    ]


def test_shared_module_texts_independent_of_selection_order(catalog):
    """Two touchpoints triggering one module: both labels, catalog order, either way round."""
    forward = DiscoverySelection(selected_touchpoint_ids=["costs-policies", "booking"])
    reverse = DiscoverySelection(selected_touchpoint_ids=["booking", "costs-policies"])

    first = generate_recommendations(forward, catalog=catalog)
    second = generate_recommendations(reverse, catalog=catalog)

    assert first == second
    reason = _by_id(first.recommended_modules)["4.3"].why_suggested
    assert reason.triggering_question_texts == [
        "Understanding costs and policies",
        "Booking or registering",
    ]


def test_selected_sub_touchpoint_adds_its_label(catalog):
    selection = DiscoverySelection(
        selected_touchpoint_ids={"costs-policies", "booking"},
        selected_sub_touchpoint_ids={"online-booking"},
    )
    result = generate_recommendations(selection, catalog=catalog)
    modules = _by_id(result.recommended_modules)

    assert modules["4.3"].why_suggested.triggering_question_texts == [
        "Understanding costs and policies",
        "Booking or registering",
        "Online booking system",
    ]
    assert modules["1.3"].why_suggested.triggering_question_texts == [
        "Booking or registering",
        "Online booking system",
    ]


def test_sub_touchpoint_without_parent_is_ignored(catalog):
    selection = DiscoverySelection(
        selected_touchpoint_ids={"finding-online"},
        selected_sub_touchpoint_ids={"online-booking"},
    )
    candidates = aggregate_candidates(selection, catalog)

    assert "1.3" not in candidates
    assert all("Online booking system" not in c.labels for c in candidates.values())


def test_triggered_takes_precedence_over_default_starter(catalog):
    """2.1 is a retail starter and is also mapped from getting-in."""
    selection = DiscoverySelection(selected_touchpoint_ids={"getting-in"}, industry_id="retail")
    result = generate_recommendations(selection, catalog=catalog)
    modules = _by_id(result.recommended_modules)

    assert modules["2.1"].why_suggested.type == "triggered"
    assert modules["2.3"].why_suggested.type == "triggered"
    assert modules["4.2"].why_suggested.type == "default-starter"
    assert modules["1.3"].why_suggested.type == "default-starter"
    assert len(result.recommended_modules) == len(set(_ids(result.recommended_modules)))


def test_online_only_business_sees_online_label(catalog):
    selection = DiscoverySelection(
        selected_touchpoint_ids={"planning-visit"},
        business_context=BusinessContext(has_physical_venue=False, has_online_presence=True),
    )
    result = generate_recommendations(selection, catalog=catalog)
    reason = _by_id(result.recommended_modules)["1.1"].why_suggested

    assert reason.triggering_question_texts == ["Exploring your offering"]


def test_venue_business_sees_standard_label(catalog):
    selection = DiscoverySelection(
        selected_touchpoint_ids={"planning-visit"},
        business_context=BusinessContext(has_physical_venue=True, has_online_presence=True),
    )
    result = generate_recommendations(selection, catalog=catalog)
    reason = _by_id(result.recommended_modules)["1.1"].why_suggested

    assert reason.triggering_question_texts == ["Planning their visit"]


def test_unknown_industry_falls_back_to_generic_defaults(catalog):
    ids, industry_name = default_starter_ids("underwater-basket-weaving", catalog)

    assert ids == ["4.2", "1.1", "2.1"]
    assert industry_name is None

    result = generate_recommendations(
        DiscoverySelection(industry_id="underwater-basket-weaving"), catalog=catalog
    )
    assert _ids(result.recommended_modules) == ["1.1", "2.1", "4.2"]
    # Unknown industry is expected steady state, so only the empty selection is flagged
    assert [w.kind for w in result.warnings] == [WarningKind.NO_SELECTION]


def test_unknown_touchpoint_is_ignored_with_warning(catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"retired-touchpoint", "finding-online"})
    result = generate_recommendations(selection, catalog=catalog)

    assert result.mode == RecommendationMode.DISCOVERY_DRIVEN
    assert [w.kind for w in result.warnings] == [WarningKind.UNKNOWN_TOUCHPOINT]
    assert "retired-touchpoint" in result.warnings[0].message


def test_only_unknown_touchpoints_fall_back_to_starters(catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"retired-touchpoint"})
    result = generate_recommendations(selection, catalog=catalog)

    assert result.mode == RecommendationMode.DEFAULT_STARTER_SET
    assert result.recommended_modules
    assert "None of your selections matched" in result.reasoning


def test_too_many_modules_warning(catalog, settings_override):
    selection = DiscoverySelection(selected_touchpoint_ids={"finding-online"})
    result = generate_recommendations(
        selection,
        catalog=catalog,
        settings=settings_override(TOO_MANY_MODULES_THRESHOLD=3),
    )

    assert [w.kind for w in result.warnings] == [WarningKind.TOO_MANY_MODULES]
    assert "6 modules" in result.warnings[0].message


def test_no_too_many_warning_below_threshold(catalog, settings_override):
    selection = DiscoverySelection(selected_touchpoint_ids={"finding-online"})
    result = generate_recommendations(
        selection,
        catalog=catalog,
        settings=settings_override(TOO_MANY_MODULES_THRESHOLD=7),
    )

    assert result.warnings == []


def test_padding_records_related_modules(catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"finding-online"})
    result = generate_recommendations(selection, catalog=catalog)
    padding = _by_id(result.also_relevant)

    assert padding["1.3"].why_suggested.related_module_ids == ["1.1", "1.2", "1.4", "1.5"]
    assert padding["2.2"].why_suggested.related_module_ids == ["2.1"]


def test_group_modules_by_group_keeps_group_order(catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"finding-online"})
    result = generate_recommendations(selection, catalog=catalog)
    groups = group_modules_by_group(result.recommended_modules, catalog=catalog)

    assert [g.group_id for g in groups] == ["before-arrival", "getting-in", "service-support"]
    assert [_ids(g.modules) for g in groups] == [["1.1", "1.2", "1.4", "1.5"], ["2.1"], ["4.2"]]
    assert groups[0].label == "Before they arrive"


# ----------------------------
# Catalog data errors
# ----------------------------

def test_unknown_module_in_mapping_is_skipped(tiny_catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"tp1"})
    result = generate_recommendations(selection, catalog=tiny_catalog)

    assert _ids(result.recommended_modules) == ["a", "d"]
    assert _ids(result.also_relevant) == ["b", "c"]
    assert result.recommended_modules[0].module_code == "A-1"
    assert "ghost" not in _ids(result.recommended_modules) + _ids(result.also_relevant)


def test_touchpoint_with_empty_mapping_falls_back(tiny_catalog):
    selection = DiscoverySelection(selected_touchpoint_ids={"tp2"})
    result = generate_recommendations(selection, catalog=tiny_catalog)

    assert result.mode == RecommendationMode.DEFAULT_STARTER_SET
    assert _ids(result.recommended_modules) == ["d"]
    assert result.warnings == []


def test_industry_with_no_starters_uses_generic_list(tiny_catalog):
    ids, industry_name = default_starter_ids("empty-ind", tiny_catalog)
    assert ids == ["d"]
    assert industry_name is None

    ids, industry_name = default_starter_ids("ind1", tiny_catalog)
    assert ids == ["b"]
    assert industry_name == "industry one"


def test_catalog_without_generic_defaults_still_recommends(tiny_catalog):
    broken = tiny_catalog.model_copy(update={"generic_defaults": [], "industries": []})
    result = generate_recommendations(DiscoverySelection(), catalog=broken)

    assert _ids(result.recommended_modules) == ["a"]


def test_module_in_unknown_group_gets_trailing_bucket(tiny_catalog):
    result = generate_recommendations(
        DiscoverySelection(selected_touchpoint_ids={"tp1"}), catalog=tiny_catalog
    )
    stray = result.recommended_modules[0].model_copy(update={"module_id": "z", "group": "retired-group"})
    groups = group_modules_by_group(result.recommended_modules + [stray], catalog=tiny_catalog)

    assert [g.group_id for g in groups] == ["g1", "g2", "retired-group"]
    assert groups[-1].label == "retired-group"
    assert _ids(groups[-1].modules) == ["z"]


# ----------------------------
# Confidence level
# ----------------------------

def test_confidence_low_for_default_starter_set(catalog):
    result = generate_recommendations(DiscoverySelection(industry_id="retail"), catalog=catalog)

    assert result.confidence_level == ConfidenceLevel.LOW


def test_confidence_medium_when_starters_fill_in(catalog):
    result = generate_recommendations(
        DiscoverySelection(selected_touchpoint_ids={"finding-online"}), catalog=catalog
    )

    assert result.confidence_level == ConfidenceLevel.MEDIUM


def test_confidence_high_when_every_module_is_triggered(catalog):
    """getting-in, staff-interaction and planning-visit trigger every generic starter."""
    selection = DiscoverySelection(selected_touchpoint_ids={"getting-in", "staff-interaction", "planning-visit"})
    result = generate_recommendations(selection, catalog=catalog)

    assert all(m.why_suggested.type == "triggered" for m in result.recommended_modules)
    assert result.confidence_level == ConfidenceLevel.HIGH
