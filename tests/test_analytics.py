from leadfunnel.sample_rows import SAMPLE_ROWS
from leadfunnel.services_analytics import AnalyticsCache, build_dashboard, compute_analytics


def test_end_to_end_sample_scenario():
    result = compute_analytics(SAMPLE_ROWS)
    assert result["totalSessions"] == 5
    assert result["funnel"] == {
        "started": 5,
        "rating_selected": 4,
        "conditions_selected": 3,
        # def456 also completed questions, so two sessions reach this stage
        "questions_completed": 2,
        "viewed_results": 2,
        "clicked_review": 1,
        "submitted": 1,
    }
    assert result["dropoffs"] == {
        "beforeRating": 1,
        "beforeConditions": 1,
        "beforeQuestions": 1,
        "beforeResults": 0,
        "beforeClick": 1,
        "beforeSubmit": 0,
    }
    assert result["ratingDistribution"] == {30: 1, 50: 1, 70: 1, 10: 1}
    assert [lead["sessionId"] for lead in result["leads"]] == ["abc123"]
    lead = result["leads"][0]
    assert lead["firstName"] == "John"
    assert lead["email"] == "john@test.com"
    assert lead["currentRating"] == 30
    assert lead["projectedRating"] == 70
    assert lead["monthlyIncrease"] == 1200.0
    assert "leadMetrics" not in result
    assert "costMetrics" not in result


def test_empty_rows_give_zero_result():
    result = compute_analytics([])
    assert result["totalSessions"] == 0
    assert set(result["funnel"].values()) == {0}
    assert set(result["dropoffs"].values()) == {0}
    assert result["ratingDistribution"] == {}
    assert result["leads"] == []


def test_metrics_included_when_statuses_or_spend_given():
    statuses = {"abc123": {"wanted": True, "retained": True}}
    result = compute_analytics(SAMPLE_ROWS, statuses=statuses, spend=500)
    assert result["leadMetrics"]["total"] == 1
    assert result["leadMetrics"]["wantedRate"] == 100.0
    assert result["costMetrics"]["costPerLead"] == 500.0
    assert result["costMetrics"]["costPerCase"] == 500.0

    only_spend = compute_analytics(SAMPLE_ROWS, spend=0)
    assert only_spend["leadMetrics"]["wanted"] == 0
    assert only_spend["costMetrics"]["costPerLead"] == 0.0


def test_recompute_is_idempotent():
    statuses = {"abc123": {"wanted": True}}
    first = compute_analytics(SAMPLE_ROWS, statuses, 120.0)
    second = compute_analytics(SAMPLE_ROWS, statuses, 120.0)
    assert first == second
    assert repr(first) == repr(second)


def test_total_sessions_counts_distinct_ids():
    rows = SAMPLE_ROWS + [{"Session Id": "new1", "Step": "1_started"}, {"step": "1_started"}]
    result = compute_analytics(rows)
    ids = {r.get("sessionId") or r.get("Session Id") for r in rows} - {None}
    assert result["totalSessions"] == len(ids) == 6


def test_lead_count_matches_lead_submission_sessions():
    rows = SAMPLE_ROWS + [
        {"type": "lead_submission", "sessionId": "ghi789", "First Name": "Bob"},
        {"type": "lead_submission", "sessionId": "ghi789", "First Name": "Robert"},
    ]
    result = compute_analytics(rows)
    assert [lead["sessionId"] for lead in result["leads"]] == ["abc123", "ghi789"]
    assert result["leads"][1]["firstName"] == "Robert"


def test_build_dashboard_adds_presentation_views():
    dashboard = build_dashboard(SAMPLE_ROWS)
    assert dashboard["leadMetrics"]["total"] == 1
    assert dashboard["costMetrics"]["spend"] == 0.0
    assert dashboard["funnelReport"][1]["pct_of_started"] == 80.0
    assert dashboard["rankedDropoffs"][-1]["count"] == 0
    assert dashboard["displayRatingDistribution"][30] == 1
    assert dashboard["displayRatingDistribution"][100] == 0
    assert dashboard["mostCommonRating"] == 10


def test_cache_returns_equal_copies():
    cache = AnalyticsCache(max_entries=2)
    first = cache.get_or_compute(SAMPLE_ROWS, {}, 0.0)
    first["funnel"]["started"] = 999
    second = cache.get_or_compute(SAMPLE_ROWS, {}, 0.0)
    assert second["funnel"]["started"] == 5
    assert second == build_dashboard(SAMPLE_ROWS, {}, 0.0)
    assert len(cache) == 1


def test_cache_key_tracks_inputs_and_evicts():
    cache = AnalyticsCache(max_entries=2)
    base = cache.get_or_compute(SAMPLE_ROWS, {}, 0.0)
    with_spend = cache.get_or_compute(SAMPLE_ROWS, {}, 100.0)
    assert base["costMetrics"]["costPerLead"] == 0.0
    assert with_spend["costMetrics"]["costPerLead"] == 100.0
    cache.get_or_compute(SAMPLE_ROWS[:3], {}, 0.0)
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0
