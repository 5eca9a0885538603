"""
Unit tests for report extraction.

The extractor must find the one JSON document in a reply that may
carry commentary or a code fence around it, and must never turn a
malformed document into a report.
"""

import json

import pytest

from swingcoach.core.analysis.errors import ExtractionFailed
from swingcoach.core.analysis.extraction import extract_report, find_document_span


class TestExtractionTolerance:

    def test_document_wrapped_in_commentary(self):
        raw = (
            'Sure, here you go:\n'
            '{"analysis":"A","issues":["a"],"drills":[{"name":"n","purpose":"p",'
            '"steps":["s1"],"frequency":"daily"}]}\n'
            'Thanks!'
        )

        report = extract_report(raw)

        assert report.analysis == "A"
        assert report.issues == ("a",)
        assert len(report.drills) == 1
        assert report.drills[0].name == "n"
        assert report.drills[0].steps == ("s1",)

    def test_document_in_code_fence(self, valid_document):
        raw = "Here is the analysis:\n```json\n" + json.dumps(valid_document, indent=2) + "\n```"

        report = extract_report(raw)

        assert report.to_dict() == valid_document

    def test_bare_document(self, valid_document):
        report = extract_report(json.dumps(valid_document))
        assert report.to_dict() == valid_document

    def test_braces_inside_narrative_text(self, valid_document):
        """Literal braces in strings must not end the document early."""
        valid_document["analysis"] = "Your grip {too strong} causes a closed face }"
        raw = "Analysis follows. " + json.dumps(valid_document) + " Have fun {and practice}."

        report = extract_report(raw)

        assert report.analysis == "Your grip {too strong} causes a closed face }"

    def test_skips_stray_braces_before_document(self, valid_document):
        raw = "Note {this is not json} then: " + json.dumps(valid_document)

        report = extract_report(raw)

        assert report.analysis == valid_document["analysis"]

    def test_extra_keys_are_ignored(self, valid_document):
        valid_document["score"] = 82
        report = extract_report(json.dumps(valid_document))
        assert report.analysis == valid_document["analysis"]


class TestExtractionFailure:

    def test_no_braces(self):
        with pytest.raises(ExtractionFailed, match="no JSON document"):
            extract_report("I couldn't see the golfer clearly in this video.")

    def test_unbalanced_braces(self):
        with pytest.raises(ExtractionFailed):
            extract_report('{"analysis": "cut off mid-')

    def test_missing_drills(self, valid_document):
        del valid_document["drills"]

        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps(valid_document))

    def test_issues_as_string_is_rejected(self, valid_document):
        """Wrong types are failures, not coerced."""
        valid_document["issues"] = "Early extension"

        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps(valid_document))

    def test_drill_without_steps_is_rejected(self, valid_document):
        valid_document["drills"][0]["steps"] = []

        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps(valid_document))

    def test_empty_analysis_is_rejected(self, valid_document):
        valid_document["analysis"] = ""

        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps(valid_document))

    def test_whitespace_analysis_is_rejected(self, valid_document):
        valid_document["analysis"] = "   "

        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps(valid_document))

    def test_top_level_array_is_rejected(self, valid_document):
        with pytest.raises(ExtractionFailed):
            extract_report(json.dumps([valid_document["issues"]]))


class TestFindDocumentSpan:

    def test_returns_first_object_span(self):
        assert find_document_span('x {"a": {"b": 1}} y {"c": 2}') == '{"a": {"b": 1}}'

    def test_handles_escaped_quotes(self):
        text = 'pre {"a": "say \\"}\\" loudly"} post'
        assert find_document_span(text) == '{"a": "say \\"}\\" loudly"}'

    def test_none_when_nothing_parses(self):
        assert find_document_span("{not json} and {also not}") is None
