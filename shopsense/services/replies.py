import json
import re
from dataclasses import dataclass, field
from typing import Optional, Union

DEFAULT_INTENT = "General Inquiry"
DEFAULT_ACTION = "Reply sent"

SOURCE_LLM = "llm"
SOURCE_FALLBACK = "fallback"

_LINE_NOISE = re.compile(r"^[\s*_>•\-]+")
_PREFIXES = ("reply", "intent", "action", "customerdata")


@dataclass(frozen=True)
class DerivedReply:
    """Reply text plus the labels that drive action dispatch."""

    reply: str
    intent: str
    action: str
    fields: dict = field(default_factory=dict)
    source: str = SOURCE_FALLBACK


@dataclass(frozen=True)
class ParsedReply:
    reply: str
    intent: str
    action: str
    fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class UnparseableReply:
    raw_text: str


ModelReply = Union[ParsedReply, UnparseableReply]


def _split_prefixed(line: str) -> tuple[Optional[str], str]:
    """Return (prefix, value) for lines like ``Intent: Quote Request``."""
    cleaned = _LINE_NOISE.sub("", line)
    lowered = cleaned.lower()
    for prefix in _PREFIXES:
        if lowered.startswith(prefix + ":") or lowered.startswith(prefix + "*"):
            _, _, value = cleaned.partition(":")
            return prefix, value.strip().strip("*_").strip()
    return None, line


def _parse_customer_data(lines: list[str], start: int, first_value: str) -> dict:
    candidates = [first_value, "\n".join([first_value, *lines[start + 1 :]])]
    for candidate in candidates:
        candidate = candidate.strip().strip("`").strip()
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return {}


def parse_model_reply(text: Optional[str]) -> ModelReply:
    """Parse the ``Reply:/Intent:/Action:/CustomerData:`` format. Never raises.

    The first line for each prefix wins. A missing intent or action falls back
    to a default label. Without a ``Reply:`` line the unprefixed text is used
    as the reply; if nothing usable is left the result is unparseable.
    """
    raw = text or ""
    if not raw.strip():
        return UnparseableReply(raw_text=raw)

    lines = raw.splitlines()
    found: dict[str, str] = {}
    fields: dict = {}
    leftovers: list[str] = []

    for index, line in enumerate(lines):
        prefix, value = _split_prefixed(line)
        if prefix is None:
            leftovers.append(line)
            continue
        if prefix in found:
            continue
        found[prefix] = value
        if prefix == "customerdata":
            fields = _parse_customer_data(lines, index, value)

    reply = found.get("reply")
    if not reply:
        reply = "\n".join(line for line in leftovers if line.strip()).strip()
        if "customerdata" in found:
            # Continuation lines of a multi-line CustomerData blob are not reply text.
            reply = reply.split("{", 1)[0].strip()
    if not reply:
        return UnparseableReply(raw_text=raw)

    return ParsedReply(
        reply=reply,
        intent=found.get("intent") or DEFAULT_INTENT,
        action=found.get("action") or DEFAULT_ACTION,
        fields=fields,
    )
