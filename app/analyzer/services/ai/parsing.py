"""
Parsing of free-form model output into analysis fields.

The model is asked for JSON but may wrap it in prose, so the object is
taken from the first ``{`` to the last ``}`` of the answer.
"""

import json
import logging

from pydantic import BaseModel

from .exceptions import AnalysisParseError

logger = logging.getLogger(__name__)


class AnalysisFields(BaseModel):
    """The six summary fields of an analysis. Missing values stay None."""

    project_name: str | None = None
    project_duration: str | None = None
    human_resources_hierarchy: str | None = None
    project_stages: str | None = None
    special_conditions: str | None = None
    implementation_boundaries: str | None = None


# JSON key in the model answer -> AnalysisFields attribute
RESPONSE_KEY_MAP: dict[str, str] = {
    "projectName": "project_name",
    "projectDuration": "project_duration",
    "humanResourcesHierarchy": "human_resources_hierarchy",
    "projectStages": "project_stages",
    "specialConditions": "special_conditions",
    "implementationBoundaries": "implementation_boundaries",
}


def extract_json_object(raw_output: str) -> str:
    """
    Return the candidate JSON object embedded in model output.

    Raises:
        AnalysisParseError: If there is no ``{`` ... ``}`` span.
    """
    start = raw_output.find("{")
    end = raw_output.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise AnalysisParseError("No JSON object found in model response", raw_output)
    return raw_output[start : end + 1]


def parse_analysis_response(raw_output: str) -> AnalysisFields:
    """
    Map a model answer to analysis fields.

    Known keys with string values are copied; anything else is ignored.

    Args:
        raw_output: The verbatim model response.

    Returns:
        AnalysisFields with every recognised value filled in.

    Raises:
        AnalysisParseError: If no well-formed JSON object can be found.
    """
    candidate = extract_json_object(raw_output or "")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse analysis response: %s", candidate[:500])
        raise AnalysisParseError(f"Invalid JSON in analysis response: {e}", raw_output) from e

    if not isinstance(data, dict):
        raise AnalysisParseError("Analysis response JSON is not an object", raw_output)

    values = {
        attribute: data[key]
        for key, attribute in RESPONSE_KEY_MAP.items()
        if isinstance(data.get(key), str)
    }
    return AnalysisFields(**values)
