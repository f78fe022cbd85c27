"""
Synthetic analytics used when Gemini cannot be reached.

Values are seeded from the project name so a project keeps seeing the same
numbers across failed calls. The portfolio forecast is the exception: it has
no single project to seed from and draws from `rng` instead.
"""

import math
import random
from typing import Any, Callable, Dict

from .utils import parse_float

DEFAULT_NAME = "Default"
DEFAULT_BUDGET = 10000
DEFAULT_COMPLETION = "2025-12-31"
PORTFOLIO_BASE_BUDGET = 50000

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri"]
ACTUAL_SCHEDULE = [0.1, 0.25, 0.4, 0.55, 0.7, 0.85]
PREDICTED_SCHEDULE = [0.12, 0.24, 0.36, 0.48, 0.60, 0.72]

Prng = Callable[[int], float]


def name_seed(name: str) -> int:
    return sum(ord(c) for c in name)


def seeded_prng(seed: int) -> Prng:
    """Deterministic value in [0, 1) for (seed, offset). Not for security."""
    def prng(offset: int) -> float:
        x = math.sin(seed + offset) * 10000
        return x - math.floor(x)
    return prng


def _budget(project_data: Dict[str, Any]) -> float:
    # 0 and unparseable budgets both fall back to the default
    return parse_float(project_data.get("budget")) or DEFAULT_BUDGET


def _level(value: float, high: float, medium: float) -> str:
    if value > high:
        return "High"
    if value > medium:
        return "Medium"
    return "Low"


def cost_forecast_fallback(project_data: Dict[str, Any], prng: Prng, rng=None) -> Dict[str, Any]:
    budget = _budget(project_data)
    variance = 1 + (prng(1) * 0.4 - 0.2)
    return {
        "forecastData": [
            {
                "name": f"Month {month}",
                "Actual": budget * actual,
                "Predicted": budget * predicted * variance,
            }
            for month, (actual, predicted) in enumerate(zip(ACTUAL_SCHEDULE, PREDICTED_SCHEDULE), start=1)
        ],
        "finalCost": budget * (1.05 + prng(2) * 0.1),
        "overrunPercentage": math.floor(5 + prng(3) * 15),
        "insight": "Spending is slightly above projection but within acceptable variance (Backend Fallback).",
    }


def _heatmap_row(name: str, prng: Prng, offset: int, floor: int, spread: int) -> Dict[str, Any]:
    return {
        "name": name,
        "data": [
            {"x": day, "y": math.floor(floor + prng(i + offset) * spread)}
            for i, day in enumerate(WEEKDAYS)
        ],
    }


def resource_utilization_fallback(project_data: Dict[str, Any], prng: Prng, rng=None) -> Dict[str, Any]:
    return {
        "utilizationScore": math.floor(70 + prng(4) * 25),
        "heatmap": [
            _heatmap_row("Dev Team", prng, 5, 60, 40),
            _heatmap_row("QA Team", prng, 10, 50, 40),
            _heatmap_row("Design", prng, 15, 40, 50),
        ],
        "pendingApprovals": math.floor(prng(20) * 5),
        "insight": "Resource utilization is optimal across key teams (Backend Fallback).",
    }


def risk_assessment_fallback(project_data: Dict[str, Any], prng: Prng, rng=None) -> Dict[str, Any]:
    score = math.floor(prng(25) * 100)
    high_risk = score > 50
    return {
        "riskScore": score,
        "confidenceLevel": _level(score, 75, 40),
        "hotspots": ["Budget Constraint", "Tight Deadline"] if high_risk else ["Minor Schedule Slip"],
        "insight": (
            "High risk detected (Backend Fallback)."
            if high_risk
            else "Project risk is well managed (Backend Fallback)."
        ),
    }


def timeline_prediction_fallback(project_data: Dict[str, Any], prng: Prng, rng=None) -> Dict[str, Any]:
    delay_chance = prng(30)
    return {
        "predictedCompletion": project_data.get("dueDate") or DEFAULT_COMPLETION,
        "delayProbability": _level(delay_chance, 0.7, 0.3),
        "phases": [
            {"name": "Planning", "status": "Done"},
            {"name": "Execution", "status": "Delayed" if delay_chance > 0.5 else "On Track"},
            {"name": "Testing", "status": "Pending"},
        ],
        "insight": "Timeline analysis completed (Backend Fallback).",
    }


def dashboard_cost_forecast_fallback(project_data: Dict[str, Any], prng: Prng, rng=None) -> Dict[str, Any]:
    rng = rng or random
    base = PORTFOLIO_BASE_BUDGET
    return {
        "forecastData": [
            {
                "name": f"Month {month}",
                "Actual": base * (0.8 + rng.random() * 0.4),
                "Predicted": base,
            }
            for month in range(1, 7)
        ],
        "insight": "Portfolio spending is within limits (Backend Fallback).",
    }
