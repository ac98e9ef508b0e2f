"""Tests for analysis prompt construction and response parsing."""

import json

import pytest

from app.analyzer.services.ai import (
    ANALYSIS_FIELD_KEYS,
    AnalysisFields,
    AnalysisParseError,
    build_analysis_prompt,
    parse_analysis_response,
)
from app.analyzer.services.ai.parsing import extract_json_object


class TestBuildAnalysisPrompt:
    """Tests for the analysis prompt."""

    def test_prompt_contains_document_text(self):
        prompt = build_analysis_prompt("--- Document: a.pdf ---\nHello world\n\n")
        assert "Hello world" in prompt
        assert "--- Document: a.pdf ---" in prompt

    def test_prompt_names_every_key(self):
        prompt = build_analysis_prompt("text")
        for key in ANALYSIS_FIELD_KEYS:
            assert f'"{key}"' in prompt

    def test_prompt_mentions_implementation_boundaries(self):
        prompt = build_analysis_prompt("text")
        assert "ITIL" in prompt
        assert "cyber security" in prompt

    def test_document_text_with_braces_is_kept_verbatim(self):
        prompt = build_analysis_prompt("config {key: value}")
        assert "config {key: value}" in prompt


class TestExtractJsonObject:
    """Tests for the brace-scanning rule."""

    def test_first_open_to_last_close(self):
        assert extract_json_object('abc {"a": {"b": 1}} def') == '{"a": {"b": 1}}'

    def test_no_braces(self):
        with pytest.raises(AnalysisParseError):
            extract_json_object("no json here")

    def test_close_before_open(self):
        with pytest.raises(AnalysisParseError):
            extract_json_object("} nothing {")


class TestParseAnalysisResponse:
    """Tests for mapping model output to analysis fields."""

    def test_wrapped_in_prose(self):
        fields = parse_analysis_response('here you go: {"projectName":"X"} thanks')

        assert fields.project_name == "X"
        assert fields.project_duration is None
        assert fields.human_resources_hierarchy is None
        assert fields.project_stages is None
        assert fields.special_conditions is None
        assert fields.implementation_boundaries is None

    def test_all_fields(self):
        payload = {
            "projectName": "Apollo",
            "projectDuration": "18 months",
            "humanResourcesHierarchy": "PM > Leads",
            "projectStages": "Discovery, Build",
            "specialConditions": "None",
            "implementationBoundaries": "ITIL",
        }
        fields = parse_analysis_response(json.dumps(payload))

        assert fields == AnalysisFields(
            project_name="Apollo",
            project_duration="18 months",
            human_resources_hierarchy="PM > Leads",
            project_stages="Discovery, Build",
            special_conditions="None",
            implementation_boundaries="ITIL",
        )

    def test_unknown_keys_ignored(self):
        fields = parse_analysis_response('{"projectName": "X", "budget": "1M"}')
        assert fields.project_name == "X"
        assert "budget" not in fields.model_dump()

    def test_non_string_values_left_unset(self):
        fields = parse_analysis_response(
            '{"projectName": "X", "projectStages": ["a", "b"], "projectDuration": null}'
        )
        assert fields.project_name == "X"
        assert fields.project_stages is None
        assert fields.project_duration is None

    def test_markdown_code_fence(self):
        raw = 'Sure!\n```json\n{"projectName": "Fenced"}\n```'
        assert parse_analysis_response(raw).project_name == "Fenced"

    def test_no_braces_fails(self):
        with pytest.raises(AnalysisParseError):
            parse_analysis_response("I could not find any project information.")

    def test_empty_output_fails(self):
        with pytest.raises(AnalysisParseError):
            parse_analysis_response("")

    def test_malformed_json_fails(self):
        with pytest.raises(AnalysisParseError) as exc_info:
            parse_analysis_response('{"projectName": "X",}')
        assert exc_info.value.raw_output == '{"projectName": "X",}'

    def test_two_objects_span_is_not_json(self):
        with pytest.raises(AnalysisParseError):
            parse_analysis_response('{"projectName": "A"} and {"projectName": "B"}')

    def test_empty_object_leaves_everything_unset(self):
        assert parse_analysis_response("{}") == AnalysisFields()
