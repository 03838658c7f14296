# =============================================================================
# greenmaster_core/ai/shapes.py
# Declared output shapes for structured AI responses
# =============================================================================
"""
An OutputShape lists the fields a structured response must have. Parsing a
response:

- strips markdown code fences and locates the JSON value;
- fills optional fields that are missing or of the wrong type with their
  default;
- raises AIResponseFormatError when a required field is missing, has the
  wrong type, or is outside its enumerated values.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from greenmaster_core.errors import AIResponseFormatError

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = "string"
    required: bool = False
    choices: Optional[Sequence[Any]] = None
    default: Any = None
    description: str = ""

    def describe(self) -> str:
        parts = [f'"{self.name}": {self.kind}']
        if self.required:
            parts.append("required")
        if self.choices:
            parts.append("one of " + ", ".join(str(c) for c in self.choices))
        if self.description:
            parts.append(self.description)
        return " - ".join(parts)


@dataclass(frozen=True)
class OutputShape:
    fields: Sequence[FieldSpec]
    many: bool = False  # a JSON array of objects instead of one object
    name: str = "response"

    def instructions(self) -> str:
        """Text appended to a prompt describing the expected JSON."""
        container = "a JSON array of objects" if self.many else "a single JSON object"
        lines = [f"Respond with {container} only, no prose. Fields:"]
        lines.extend(f"- {field_def.describe()}" for field_def in self.fields)
        return "\n".join(lines)

    def validate(self, data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise AIResponseFormatError(f"{self.name}: expected an object, got {type(data).__name__}")
        result = dict(data)
        for field_def in self.fields:
            value = data.get(field_def.name)
            ok = value is not None and _TYPE_CHECKS[field_def.kind](value)
            if ok and field_def.choices and value not in field_def.choices:
                ok = False
            if ok:
                continue
            if field_def.required:
                raise AIResponseFormatError(
                    f"{self.name}: field '{field_def.name}' is missing or invalid",
                    details={"field": field_def.name, "value": value},
                )
            result[field_def.name] = field_def.default() if callable(field_def.default) else field_def.default
        return result

    def parse(self, text: str) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        data = load_json(text)
        if self.many:
            if isinstance(data, dict) and isinstance(data.get("items"), list):
                data = data["items"]
            elif isinstance(data, dict):
                data = [data]
            if not isinstance(data, list):
                raise AIResponseFormatError(f"{self.name}: expected a JSON array")
            return [self.validate(item) for item in data]
        return self.validate(data)


# =============================================================================
# JSON EXTRACTION
# =============================================================================

def _extract_fenced_block(text: str) -> Optional[str]:
    blocks = re.findall(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL | re.IGNORECASE)
    return blocks[0].strip() if blocks else None


def _extract_balanced_json_span(text: str) -> Optional[str]:
    """First balanced top-level JSON object/array in ``text``."""
    starts = [(text.find(o), o, c) for o, c in (("{", "}"), ("[", "]")) if text.find(o) != -1]
    if not starts:
        return None
    start_idx, open_ch, close_ch = min(starts)
    depth = 0
    in_string = False
    escape = False
    for i in range(start_idx, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]
    return None


def load_json(raw_text: str) -> Any:
    """Parse the JSON value in a model response (fenced, bare or embedded)."""
    text = (raw_text or "").strip()
    if not text:
        raise AIResponseFormatError("Empty response")

    candidates: List[str] = []
    fenced = _extract_fenced_block(text)
    if fenced:
        candidates.append(fenced)
    candidates.append(text)
    balanced = _extract_balanced_json_span(text)
    if balanced:
        candidates.append(balanced)

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    raise AIResponseFormatError("Response is not valid JSON", details={"preview": text[:200]})
