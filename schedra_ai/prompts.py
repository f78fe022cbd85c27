"""
Prompt templates, one per analysis type.

Every template asks Gemini for a single JSON object in a fixed shape; the
shapes mirror the result models in schemas.py.
"""

from typing import Any, Dict, List, Optional

from .utils import format_value, to_number

# Portfolio summaries are cut to this many characters before "..." is appended
SUMMARY_LIMIT = 1000


def _field(project_data: Optional[Dict[str, Any]], key: str) -> str:
    if not isinstance(project_data, dict):
        return format_value(None)
    return format_value(project_data.get(key))


def cost_forecast_prompt(project_data: Optional[Dict[str, Any]], projects=None) -> str:
    return f"""
You are an AI project manager. Analyze the following project data and provide a JSON response.

Project Context:
Name: {_field(project_data, "name")}
Budget: {_field(project_data, "budget")}
Start Date: {_field(project_data, "startDate")}
Description: {_field(project_data, "description")}

Task: Generate a cost forecast comparing actual spend vs AI-predicted budget for the last 6 months.
Also predict final cost and potential overrun percentage.

Return ONLY valid JSON in this format:
{{
    "forecastData": [
        {{"name": "Month 1", "Actual": 1000, "Predicted": 1200}},
        ... (6 months)
    ],
    "finalCost": 120000,
    "overrunPercentage": 15,
    "insight": "Brief one sentence insight."
}}
"""


def resource_utilization_prompt(project_data: Optional[Dict[str, Any]], projects=None) -> str:
    return f"""
You are an AI resource planner. Analyze the project: {_field(project_data, "name")}.
Generate a heatmap of team activity and utilization stats.

Return ONLY valid JSON in this format:
{{
    "utilizationScore": 85,
    "heatmap": [
        {{"name": "Dev Team", "data": [{{"x": "Mon", "y": 80}}, {{"x": "Tue", "y": 90}} ... (5 days)]}}
    ],
    "pendingApprovals": 3,
    "insight": "Brief one sentence insight."
}}
"""


def risk_assessment_prompt(project_data: Optional[Dict[str, Any]], projects=None) -> str:
    return f"""
You are an AI Risk Analyst. Analyze: {_field(project_data, "name")}.

Return ONLY valid JSON in this format:
{{
    "riskScore": 78,
    "confidenceLevel": "High",
    "hotspots": [
        "Supply Chain Delay"
    ],
    "insight": "Brief one sentence mitigation strategy."
}}
"""


def timeline_prediction_prompt(project_data: Optional[Dict[str, Any]], projects=None) -> str:
    return f"""
You are an AI Scheduler. Analyze: {_field(project_data, "name")}.

Return ONLY valid JSON in this format:
{{
    "predictedCompletion": "2025-12-25",
    "delayProbability": "Medium",
    "phases": [
        {{"name": "Implementation", "status": "Delayed"}}
    ],
    "insight": "Reason for potential delay."
}}
"""


def _project_list(projects: Any) -> List[Any]:
    return projects if isinstance(projects, list) else []


def summarize_portfolio(projects: Any) -> str:
    """'<name> ($<budget>)' per project, comma separated and length capped."""
    summary = ", ".join(
        f"{_field(p, 'name')} (${_field(p, 'budget')})" for p in _project_list(projects)
    )
    return summary[:SUMMARY_LIMIT]


def total_budget(projects: Any) -> float:
    return sum(to_number(p.get("budget")) for p in _project_list(projects) if isinstance(p, dict))


def dashboard_cost_forecast_prompt(project_data: Optional[Dict[str, Any]], projects=None) -> str:
    summary = summarize_portfolio(projects)
    total = format_value(total_budget(projects))
    return f"""
You are a Portfolio Manager. Analyze these projects: {summary}...
Total Portfolio Budget: ${total}.

Generate an aggregated 'Actual vs Predicted' cost analysis for the last 6 months for the entire portfolio.
Assume 'Actual' varies slightly from 'Predicted'.

Return ONLY valid JSON in this format:
{{
    "forecastData": [
        {{"name": "Month 1", "Actual": 45000, "Predicted": 50000}},
        {{"name": "Month 2", "Actual": 52000, "Predicted": 50000}},
        ... (6 months)
    ],
    "insight": "Brief aggregated financial insight."
}}
"""
