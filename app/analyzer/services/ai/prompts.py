"""
Prompt construction for project document analysis.
"""

import json

# Keys the model must use in its JSON answer, in prompt order
ANALYSIS_FIELD_KEYS: tuple[str, ...] = (
    "projectName",
    "projectDuration",
    "humanResourcesHierarchy",
    "projectStages",
    "specialConditions",
    "implementationBoundaries",
)

ANALYSIS_PROMPT_TEMPLATE = """Analyze the following project document and extract the following information in JSON format:

1. Project Name
2. Duration of the project
3. Hierarchy of human resources needed for the project
4. Stages of the project
5. Special conditions of the project
6. Boundaries of implementing the project (ITIL, governance, cyber security)

Document Content:
{document_text}

Please provide your response in the following JSON format:
{response_format}

Return ONLY this JSON object with exactly these keys. Every value must be a string."""


def build_analysis_prompt(document_text: str) -> str:
    """
    Build the analysis prompt for the combined document text.

    Args:
        document_text: Text of one or more documents, already concatenated.

    Returns:
        The prompt sent as the single user message.
    """
    response_format = json.dumps({key: "..." for key in ANALYSIS_FIELD_KEYS}, indent=2)
    return ANALYSIS_PROMPT_TEMPLATE.format(
        document_text=document_text,
        response_format=response_format,
    )
