"""
Report extraction from the model's raw reply.

The model is told to answer with JSON only, but replies sometimes come
wrapped in a code fence or a sentence of commentary. We look for a
fenced json block first, then for the first balanced {...} span that
decodes to an object. Braces inside JSON strings don't count toward
nesting, so narrative text containing "{" or "}" is handled.

Validation is strict: wrong types are rejected, never coerced. A reply
either becomes a complete AnalysisReport or raises ExtractionFailed.
"""

import json
import logging
import re
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from .errors import ExtractionFailed
from .models import AnalysisReport, Drill


logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


# ---------------------------------------------------------------------------
# Document schema
# ---------------------------------------------------------------------------

class _DrillDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    purpose: StrictStr
    steps: list[StrictStr] = Field(min_length=1)
    frequency: StrictStr


class _ReportDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    analysis: StrictStr = Field(min_length=1)
    issues: list[StrictStr]
    drills: list[_DrillDocument]


# ---------------------------------------------------------------------------
# Locating the document
# ---------------------------------------------------------------------------

def _balanced_spans(text: str) -> Iterator[str]:
    """Yield each balanced {...} span, trying every opening brace in order."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            char = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    yield text[start:i + 1]
                    break
        start = text.find("{", start + 1)


def _decode_object(candidate: str) -> Optional[dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def find_document_span(text: str) -> Optional[str]:
    """
    Return the first balanced {...} span in text that decodes to a JSON object.

    Returns None when the text has no such span.
    """
    for span in _balanced_spans(text):
        if _decode_object(span) is not None:
            return span
    return None


def _locate_document(text: str) -> dict[str, Any]:
    for match in _FENCED_JSON.finditer(text):
        document = _decode_object(match.group(1))
        if document is not None:
            return document

    span = find_document_span(text)
    if span is None:
        raise ExtractionFailed("Could not parse analysis: no JSON document in reply")
    return json.loads(span)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def extract_report(raw_text: str) -> AnalysisReport:
    """Parse and validate the report embedded in raw_text."""
    document = _locate_document(raw_text)

    try:
        parsed = _ReportDocument.model_validate(document)
    except ValidationError as e:
        logger.warning(
            "Report document failed validation",
            extra={"errors": e.error_count(), "keys": sorted(document)},
        )
        raise ExtractionFailed(f"Could not parse analysis: {e.error_count()} invalid field(s)") from e

    try:
        return AnalysisReport(
            analysis=parsed.analysis,
            issues=tuple(parsed.issues),
            drills=tuple(
                Drill(
                    name=drill.name,
                    purpose=drill.purpose,
                    steps=tuple(drill.steps),
                    frequency=drill.frequency,
                )
                for drill in parsed.drills
            ),
        )
    except ValueError as e:
        raise ExtractionFailed(f"Could not parse analysis: {e}") from e
