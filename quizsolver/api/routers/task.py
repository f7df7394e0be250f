"""Task acceptance endpoint.

Routes
------
POST /task    Body: {"email": "...", "secret": "...", "url": "https://..."}

The request is validated and authenticated here, acknowledged with
``{"accepted": true}`` and only then processed as a background task.  The
pipeline's outcome is logged, never returned: the caller has already had
its answer.

Error responses use a flat ``{"error": "..."}`` body:

    400  not JSON, malformed JSON, or a missing/empty field
    403  wrong shared secret
    413  body larger than ``settings.max_body_bytes``
"""

from __future__ import annotations

import hmac
import json
import time

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from quizsolver.pipeline.models import TaskRequest

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class TaskPayload(BaseModel):
    email: str = Field(min_length=1)
    secret: str = Field(min_length=1)
    url: str = Field(min_length=1)


class AcceptedResponse(BaseModel):
    accepted: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _secret_matches(given: str, expected: str) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=AcceptedResponse)
async def submit_task(request: Request, background_tasks: BackgroundTasks):
    """Validate a task, acknowledge it and schedule the pipeline."""
    accepted_at = time.monotonic()
    settings = request.app.state.settings

    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        return _error(400, "Expected application/json")

    body = await request.body()
    if len(body) > settings.max_body_bytes:
        return _error(413, "Request body too large")

    try:
        payload = TaskPayload.model_validate(json.loads(body))
    except (ValueError, ValidationError):
        return _error(400, "Missing required fields: email, secret, url")

    if not _secret_matches(payload.secret, settings.secret):
        return _error(403, "Invalid secret")

    task = TaskRequest(email=payload.email, secret=payload.secret, url=payload.url)
    background_tasks.add_task(request.app.state.orchestrator.process, task, accepted_at)
    return {"accepted": True}
