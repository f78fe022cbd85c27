"""
Core orchestration / pipeline.

Flow:
1. Look up the analysis type in ANALYSIS_KINDS and build its prompt
2. Ask Gemini (key rotation / retries live in llm_client)
3. Extract the JSON object from the reply text
4. If Gemini itself failed, answer with synthetic fallback data instead

A reply that is not valid JSON is reported as an error, never replaced by
fallback data.
"""

import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from . import fallback, prompts
from .errors import ResponseFormatError, UnrecognizedTypeError, UpstreamGenerationError
from .llm_client import GenerationClient
from .schemas import (
    AnalysisRequest,
    AnalysisType,
    CostForecast,
    DashboardCostForecast,
    ResourceUtilization,
    RiskAssessment,
    TimelinePrediction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisKind:
    prompt_builder: Callable[..., str]
    response_schema: Type[BaseModel]
    fallback_generator: Callable[..., Dict[str, Any]]


ANALYSIS_KINDS: Dict[str, AnalysisKind] = {
    AnalysisType.COST_FORECAST.value: AnalysisKind(
        prompts.cost_forecast_prompt, CostForecast, fallback.cost_forecast_fallback
    ),
    AnalysisType.RESOURCE_UTILIZATION.value: AnalysisKind(
        prompts.resource_utilization_prompt, ResourceUtilization, fallback.resource_utilization_fallback
    ),
    AnalysisType.RISK_ASSESSMENT.value: AnalysisKind(
        prompts.risk_assessment_prompt, RiskAssessment, fallback.risk_assessment_fallback
    ),
    AnalysisType.TIMELINE_PREDICTION.value: AnalysisKind(
        prompts.timeline_prediction_prompt, TimelinePrediction, fallback.timeline_prediction_fallback
    ),
    AnalysisType.DASHBOARD_COST_FORECAST.value: AnalysisKind(
        prompts.dashboard_cost_forecast_prompt, DashboardCostForecast, fallback.dashboard_cost_forecast_fallback
    ),
}


def build_prompt(
    analysis_type: Optional[str],
    project_data: Optional[Dict[str, Any]],
    projects: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """Prompt for `analysis_type`, or "" when the type is unknown."""
    kind = ANALYSIS_KINDS.get(analysis_type) if isinstance(analysis_type, str) else None
    if kind is None:
        return ""
    return kind.prompt_builder(project_data, projects)


def generate_fallback_data(
    analysis_type: Optional[str],
    project_data: Optional[Dict[str, Any]],
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Synthetic result for `analysis_type`, seeded from the project name.
    Unknown types get a "No data available" message instead of an error.
    """
    kind = ANALYSIS_KINDS.get(analysis_type) if isinstance(analysis_type, str) else None
    if kind is None:
        return {"message": "No data available"}

    project_data = project_data if isinstance(project_data, dict) else {}
    name = project_data.get("name") or fallback.DEFAULT_NAME
    prng = fallback.seeded_prng(fallback.name_seed(str(name)))
    return kind.fallback_generator(project_data, prng, rng)


def extract_json(text: str) -> Any:
    """
    Extract the JSON object from a Gemini reply.
    Handles markdown code fences and prose around the object.
    """
    json_str = text.replace("```json", "").replace("```", "").strip()

    first_brace = json_str.find("{")
    last_brace = json_str.rfind("}")
    if first_brace != -1 and last_brace != -1:
        json_str = json_str[first_brace:last_brace + 1]

    try:
        return json.loads(json_str, parse_constant=_reject_constant)
    except ValueError as e:
        raise ResponseFormatError(str(e), raw_text=text) from e


def _reject_constant(name: str):
    # NaN / Infinity are not JSON and cannot be rendered back to the client
    raise ValueError(f"Invalid JSON constant: {name}")


def _check_shape(analysis_type: str, data: Any) -> None:
    """Log (without rejecting) replies that drift from the expected shape."""
    schema = ANALYSIS_KINDS[analysis_type].response_schema
    try:
        schema.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Gemini {analysis_type} reply does not match {schema.__name__}: {e.error_count()} issue(s)")


async def run_analysis(
    request: AnalysisRequest,
    client: GenerationClient,
    rng: Optional[random.Random] = None,
) -> Any:
    """
    Main analysis pipeline.

    Args:
        request: Parsed request body
        client: Gemini client used for the single generation call
        rng: Random source for the portfolio fallback

    Returns:
        Parsed Gemini JSON, or fallback data when Gemini could not answer.

    Raises:
        UnrecognizedTypeError: no template for request.type
        ConfigurationError: client has no API keys
        ResponseFormatError: Gemini answered with something that is not JSON
    """
    analysis_type = request.type
    logger.info(f"Request type: {analysis_type}")

    prompt = build_prompt(analysis_type, request.project_data, request.projects)
    if not prompt:
        raise UnrecognizedTypeError(analysis_type)

    try:
        text = await client.generate(prompt)
    except UpstreamGenerationError as e:
        logger.error(f"Gemini API final failure after {len(e.attempts)} attempt(s): {e}")
        logger.warning("Generating static fallback data to keep the dashboard alive.")
        return generate_fallback_data(analysis_type, request.project_data, rng)

    logger.info(f"Gemini response text (first 100 chars): {text[:100]}")

    try:
        data = extract_json(text)
    except ResponseFormatError:
        logger.error(f"JSON parse error. Full response text: {text}")
        raise

    _check_shape(analysis_type, data)
    return data
