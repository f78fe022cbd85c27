import random

import pytest

from schedra_ai.analyzer import ANALYSIS_KINDS, generate_fallback_data
from schedra_ai.fallback import name_seed, seeded_prng
from schedra_ai.schemas import AnalysisType


def test_name_seed_sums_character_codes():
    assert name_seed("Beta") == 66 + 101 + 116 + 97


def test_prng_is_in_unit_interval_and_repeatable():
    prng = seeded_prng(380)
    values = [prng(offset) for offset in range(40)]
    assert all(0 <= v < 1 for v in values)
    assert values == [seeded_prng(380)(offset) for offset in range(40)]


def test_cost_forecast_is_deterministic():
    project = {"name": "Alpha", "budget": 10000}
    assert generate_fallback_data("cost_forecast", project) == generate_fallback_data("cost_forecast", dict(project))


@pytest.mark.parametrize("analysis_type", [
    "cost_forecast", "resource_utilization", "risk_assessment", "timeline_prediction",
])
def test_seeded_types_repeat_for_same_project(analysis_type):
    project = {"name": "Gamma", "budget": "42000", "dueDate": "2026-03-01"}
    assert generate_fallback_data(analysis_type, project) == generate_fallback_data(analysis_type, project)


@pytest.mark.parametrize("analysis_type", [t.value for t in AnalysisType])
def test_fallback_matches_response_schema(analysis_type):
    data = generate_fallback_data(analysis_type, {"name": "Delta", "budget": 5000}, rng=random.Random(3))
    ANALYSIS_KINDS[analysis_type].response_schema.model_validate(data)


@pytest.mark.parametrize("budget, expected", [
    (20000, 20000),
    ("20000", 20000),
    ("1500.5 USD", 1500.5),
    ("abc", 10000),
    (None, 10000),
    (0, 10000),
])
def test_cost_forecast_budget_parsing(budget, expected):
    data = generate_fallback_data("cost_forecast", {"name": "Alpha", "budget": budget})
    actuals = [point["Actual"] for point in data["forecastData"]]
    assert actuals == pytest.approx([expected * f for f in (0.1, 0.25, 0.4, 0.55, 0.7, 0.85)])
    assert expected * 1.05 <= data["finalCost"] <= expected * 1.15
    assert 5 <= data["overrunPercentage"] < 20


def test_missing_name_uses_default_seed():
    assert generate_fallback_data("risk_assessment", {}) == generate_fallback_data(
        "risk_assessment", {"name": "Default"}
    )
    assert generate_fallback_data("risk_assessment", None) == generate_fallback_data(
        "risk_assessment", {"name": "Default"}
    )


@pytest.mark.parametrize("name", ["Alpha", "Beta", "Gamma", "Omega Program", "x", "Default"])
def test_risk_confidence_follows_score(name):
    data = generate_fallback_data("risk_assessment", {"name": name})
    score = data["riskScore"]
    assert 0 <= score <= 100
    if score > 75:
        assert data["confidenceLevel"] == "High"
    elif score > 40:
        assert data["confidenceLevel"] == "Medium"
    else:
        assert data["confidenceLevel"] == "Low"
    if score > 50:
        assert data["hotspots"] == ["Budget Constraint", "Tight Deadline"]
    else:
        assert data["hotspots"] == ["Minor Schedule Slip"]


def test_resource_utilization_ranges():
    data = generate_fallback_data("resource_utilization", {"name": "Alpha"})
    assert 70 <= data["utilizationScore"] < 95
    assert [row["name"] for row in data["heatmap"]] == ["Dev Team", "QA Team", "Design"]
    for row, (low, spread) in zip(data["heatmap"], [(60, 40), (50, 40), (40, 50)]):
        assert [cell["x"] for cell in row["data"]] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
        assert all(low <= cell["y"] < low + spread for cell in row["data"])
    assert 0 <= data["pendingApprovals"] < 5


def test_timeline_uses_due_date_when_present():
    with_due = generate_fallback_data("timeline_prediction", {"name": "Alpha", "dueDate": "2026-06-30"})
    without_due = generate_fallback_data("timeline_prediction", {"name": "Alpha"})
    assert with_due["predictedCompletion"] == "2026-06-30"
    assert without_due["predictedCompletion"] == "2025-12-31"
    assert [p["name"] for p in with_due["phases"]] == ["Planning", "Execution", "Testing"]


def test_dashboard_forecast_uses_injected_rng():
    first = generate_fallback_data("dashboard_cost_forecast", None, rng=random.Random(11))
    second = generate_fallback_data("dashboard_cost_forecast", None, rng=random.Random(11))
    assert first == second


def test_dashboard_forecast_stays_near_base_budget():
    data = generate_fallback_data("dashboard_cost_forecast", {"name": "ignored"})
    assert len(data["forecastData"]) == 6
    for point in data["forecastData"]:
        assert point["Predicted"] == 50000
        assert 40000 <= point["Actual"] <= 60000


def test_unknown_type_returns_no_data_message():
    assert generate_fallback_data("sentiment", {"name": "Alpha"}) == {"message": "No data available"}
