"""
Validation of model output.
The plan is hard-validated: anything that doesn't fit the component/prop
schema is rejected with MalformedPlanError before the generator runs.
Code and explanation are soft-validated: findings come back as warnings
alongside the output instead of failing the request.
"""

import json
import re
from typing import Optional

from pydantic import ValidationError

from genui.errors import MalformedPlanError
from genui.models.components import ALLOWED_COMPONENTS, Plan


_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)
_TAG_RE = re.compile(r"<\s*([A-Za-z][\w.]*)")
_STYLE_ATTR_RE = re.compile(r"\b(style|className)\s*=")
_IMPORT_RE = re.compile(r"^\s*import\b", re.MULTILINE)
_COMMENT_RE = re.compile(r"\{\s*/\*|<!--|^\s*//", re.MULTILINE)

MAX_SCHEMA_ERRORS = 5

_DECODER = json.JSONDecoder()


def strip_fences(text: str) -> str:
    """Remove a single surrounding markdown code fence, if present."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def _describe(exc: ValidationError) -> str:
    errors = exc.errors()
    parts = []
    for err in errors[:MAX_SCHEMA_ERRORS]:
        loc = ".".join(str(p) for p in err["loc"]) or "plan"
        parts.append(f"{loc}: {err['msg']}")
    if len(errors) > MAX_SCHEMA_ERRORS:
        parts.append(f"... and {len(errors) - MAX_SCHEMA_ERRORS} more")
    return "; ".join(parts)


def parse_plan(raw: str) -> Plan:
    """
    Turn the planner's raw completion into a validated Plan.
    Tolerates a markdown fence or prose around the JSON object, nothing else.
    The first object in the text is decoded; anything after it is ignored.
    """
    text = strip_fences(raw or "")

    start = text.find("{")
    if start < 0:
        raise MalformedPlanError("parse", "No JSON object in planner output", raw or "")

    try:
        data, _ = _DECODER.raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise MalformedPlanError(
            "parse",
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            raw,
        ) from e
    except RecursionError as e:
        raise MalformedPlanError("parse", "Planner output nests too deeply", raw) from e

    try:
        return Plan.model_validate(data)
    except ValidationError as e:
        raise MalformedPlanError("schema", _describe(e), raw) from e


def _component_tags(code: str) -> list[str]:
    return _TAG_RE.findall(code)


def check_code(code: str, plan: Plan, previous_code: Optional[str] = None) -> list[str]:
    """Soft checks on the generator's JSX. Returns human-readable warnings."""
    if not code or not code.strip():
        return ["Generated code is empty"]

    warnings: list[str] = []
    body = strip_fences(code)
    if body != code.strip():
        warnings.append("Generated code is wrapped in a markdown fence")

    if not (body.startswith("<>") and body.endswith("</>")):
        warnings.append("Generated code is not a single <>...</> fragment")

    tags = _component_tags(body)
    generic = sorted({t for t in tags if t[0].islower()})
    if generic:
        warnings.append(f"Generated code uses generic markup: {', '.join(generic)}")

    unknown = sorted({t for t in tags if t[0].isupper() and t not in ALLOWED_COMPONENTS})
    if unknown:
        warnings.append(f"Generated code uses unknown components: {', '.join(unknown)}")

    if _STYLE_ATTR_RE.search(body):
        warnings.append("Generated code sets style or className attributes")
    if _IMPORT_RE.search(body):
        warnings.append("Generated code contains import statements")
    if _COMMENT_RE.search(body):
        warnings.append("Generated code contains comments")

    used = set(tags)
    missing = [name for name in dict.fromkeys(plan.component_names()) if name not in used]
    if missing:
        warnings.append(f"Planned components missing from code: {', '.join(missing)}")

    if plan.type == "modify":
        if previous_code is None or not previous_code.strip():
            warnings.append("Plan is in modify mode but no previous UI was supplied")
        else:
            planned = set(plan.component_names())
            prior = [
                t for t in dict.fromkeys(_component_tags(previous_code))
                if t in ALLOWED_COMPONENTS and t not in planned
            ]
            if prior:
                warnings.append(
                    f"Components from the previous UI not in the plan: {', '.join(prior)}"
                )

    return warnings


def check_explanation(text: str) -> list[str]:
    if not text or not text.strip():
        return ["Explanation is empty"]
    if "```" in text:
        return ["Explanation contains code"]
    return []
