"""Turn a decoded payload into a structured :class:`Instruction`."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from quizsolver.pipeline.models import DecodedPayload, Instruction

logger = logging.getLogger(__name__)

# Greedy: first "{" through the last "}" in the text.
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

# Submission endpoint keys, most preferred first.
SUBMISSION_KEYS = ("submit", "submitUrl", "postUrl")


def _submission_url(fields: dict[str, Any]) -> Optional[str]:
    for key in SUBMISSION_KEYS:
        value = fields.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def resolve(payload: DecodedPayload) -> Optional[Instruction]:
    """Parse the first JSON object in *payload* into an :class:`Instruction`.

    Returns ``None`` (never raises) when the text holds no JSON object, the
    object does not parse, or it carries no resource ``url``.
    """
    match = _JSON_OBJECT.search(payload.text)
    if not match:
        logger.info("[RESOLVE] No structured instruction found in decoded text")
        return None

    try:
        fields = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.warning(f"[RESOLVE] JSON parse failed: {exc}")
        return None

    if not isinstance(fields, dict):
        logger.info("[RESOLVE] Decoded JSON is not an object")
        return None

    resource_url = fields.get("url")
    if not isinstance(resource_url, str) or not resource_url.strip():
        logger.info("[RESOLVE] Instruction carries no resource url")
        return None

    instruction = Instruction(
        resource_url=resource_url.strip(),
        submission_url=_submission_url(fields),
        fields=fields,
    )
    logger.info(f"[RESOLVE] Found instruction: {instruction.fields}")
    return instruction
