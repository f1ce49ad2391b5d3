"""
Response Repair Pipeline
========================
Turns raw completion text into parsed JSON data.

Passes (strictly ordered, first success wins):
    1. Strip      — drop markdown code fences and leading prose lines
    2. Strict     — json.loads on the stripped text
    3. Syntactic  — json_repair.repair_json on the stripped text, then json.loads
    4. Salvage    — extract an embedded object, repair it, then json.loads
    5. Failure    — UnrepairableResponseError carrying the raw text

Syntactic Healing (json_repair):
    - Trailing commas, single quotes, unquoted keys, missing commas
    - Unterminated strings and missing closing braces/brackets (truncation)
    - Unescaped inner quotes

A healed result is only accepted when it is the same kind of container the
text opens with. repair_json turns prose into "" and two concatenated
objects into a list, so neither may stand in for the intended object.

Salvage Candidates (each tried untouched first, then repaired):
    1. Each top-level balanced {...} object, in order of appearance
    2. Outermost span from the first { to the last }
    3. Span from the first { to the end of the text (truncated output)

Preferring the first balanced object means a completion that shows an
example object before the real one yields the example, never a merge of
both. Well-formed JSON is always returned by pass 2 untouched.

The pipeline is pure: no I/O, no state, no logging of content.
"""
import json
import re
from dataclasses import dataclass
from typing import Any

from json_repair import repair_json

from app.core.errors import UnrepairableResponseError

# Stage names reported in RepairOutcome.stage
STAGE_STRICT = "strict"
STAGE_SYNTACTIC = "syntactic"
STAGE_SALVAGE = "salvage"

_FENCE_RE = re.compile(r"```[ \t]*[A-Za-z0-9_+-]*[ \t]*\r?\n?(.*?)(?:```|\Z)", re.DOTALL)

_CONTAINER_TYPES = {"{": dict, "[": list}


@dataclass
class RepairOutcome:
    """Parsed value plus the name of the pass that produced it."""
    value: Any
    stage: str


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def repair(raw_text: str) -> Any:
    """Repair ``raw_text`` into a JSON value. See ``repair_with_stage``."""
    return repair_with_stage(raw_text).value


def repair_with_stage(raw_text: str) -> RepairOutcome:
    """
    Run the repair passes over a raw completion.

    Parameters
    ----------
    raw_text : str
        Completion text exactly as returned by the backend.

    Returns
    -------
    RepairOutcome
        The parsed value and the stage that succeeded.

    Raises
    ------
    UnrepairableResponseError
        If every pass fails. The error carries ``raw_text`` unchanged.
    """
    raw = raw_text if isinstance(raw_text, str) else ""
    stripped = strip_wrapping(raw)

    ok, value = _try_loads(stripped)
    if ok:
        return RepairOutcome(value, STAGE_STRICT)

    ok, value = heal(stripped)
    if ok:
        return RepairOutcome(value, STAGE_SYNTACTIC)

    candidates: list[str] = []
    for source in (stripped, raw):
        for candidate in salvage_candidates(source):
            if candidate not in candidates:
                candidates.append(candidate)
    # untouched extractions first, so a stray "{word}" in prose cannot win by healing
    for attempt in (_try_loads, heal):
        for candidate in candidates:
            ok, value = attempt(candidate)
            if ok:
                return RepairOutcome(value, STAGE_SALVAGE)

    reason = "empty completion" if not raw.strip() else "no parseable JSON found"
    raise UnrepairableResponseError(raw, reason)


# ---------------------------------------------------------------------------
# Pass 1 — Strip
# ---------------------------------------------------------------------------
def strip_wrapping(text: str) -> str:
    """
    Remove markdown code fences and prose lines preceding the JSON literal.

    A fence is only honoured when it opens before the first brace/bracket,
    so fences quoted inside JSON string values are left alone. Trailing
    prose is not cut here; a truncated literal has no reliable end line.
    """
    text = text.strip()
    if not text:
        return text

    fence_at = text.find("```")
    if fence_at != -1 and fence_at < _first_structural(text):
        match = _FENCE_RE.search(text, fence_at)
        if match:
            text = match.group(1).strip()

    lines = text.splitlines()
    for index, line in enumerate(lines):
        if line.lstrip().startswith(("{", "[")):
            if index:
                text = "\n".join(lines[index:]).strip()
            break
    return text


def _first_structural(text: str) -> int:
    positions = [p for p in (text.find("{"), text.find("[")) if p != -1]
    return min(positions) if positions else len(text)


# ---------------------------------------------------------------------------
# Pass 3 — Syntactic healing
# ---------------------------------------------------------------------------
def heal(text: str) -> tuple[bool, Any]:
    """
    Parse ``text`` after json_repair has healed it.

    Only text that opens a JSON object or array is healed, and the healed
    value must be that same container type. An object followed by more
    text is left to salvage. Returns (ok, value).
    """
    text = text.strip()
    expected = _CONTAINER_TYPES.get(text[:1])
    if expected is None:
        return False, None
    if expected is dict and _balanced_end(text, 0) not in (-1, len(text) - 1):
        return False, None
    try:
        healed = repair_json(text)
    except (ValueError, RecursionError):
        return False, None
    ok, value = _try_loads(healed)
    if not ok or not isinstance(value, expected):
        return False, None
    return True, value


# ---------------------------------------------------------------------------
# Pass 4 — Salvage-by-extraction
# ---------------------------------------------------------------------------
def salvage_candidates(text: str) -> list[str]:
    """Substrings that may hold the intended object, most specific first."""
    first = text.find("{")
    if first == -1:
        return []
    candidates = balanced_objects(text)
    last = text.rfind("}")
    if last > first:
        span = text[first:last + 1]
        if span not in candidates:
            candidates.append(span)
    tail = text[first:].rstrip().rstrip("`").rstrip()
    if tail not in candidates:
        candidates.append(tail)
    return candidates


def balanced_objects(text: str) -> list[str]:
    """Every top-level brace-balanced {...} substring, in order. String-aware."""
    found: list[str] = []
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end == -1:
            # truncated from here on; nothing later can close either
            break
        found.append(text[start:end + 1])
        start = text.find("{", end + 1)
    return found


def _balanced_end(text: str, start: int) -> int:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        ch = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _try_loads(text: str) -> tuple[bool, Any]:
    if not text or not text.strip():
        return False, None
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return False, None
