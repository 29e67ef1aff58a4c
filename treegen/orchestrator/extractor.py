"""
Best-effort recovery of one JSON object from provider text.

Some providers wrap the JSON in prose ("Here is the tree: {...} Thanks!").
The policy is a pattern match, not a tokenizer: take the span from the
first ``{`` to the last ``}`` and parse it; without such a span, parse
the text verbatim. Prose that itself contains braces after the object
will widen the span and fail to parse. That is a known limitation.
"""

import json
import logging
import re

from treegen.shared.exceptions import MalformedResponse

logger = logging.getLogger(__name__)

_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> dict:
    """Return the JSON object embedded in ``text``.

    Raises MalformedResponse when neither the brace span nor the full text
    parses, or when the parsed value is not an object.
    """
    if not isinstance(text, str):
        raise MalformedResponse(f"Expected text, got {type(text).__name__}")

    candidates = []
    match = _BRACE_SPAN.search(text)
    if match:
        candidates.append(match.group(0))
    if not match or match.group(0) != text:
        candidates.append(text)

    last_error = None
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            continue
        if isinstance(data, dict):
            return data
        last_error = ValueError(f"top-level value is {type(data).__name__}")

    preview = text[:120].replace("\n", " ")
    logger.debug(f"JSON extraction failed for: {preview!r}")
    raise MalformedResponse(f"No JSON object in provider response: {last_error}")
