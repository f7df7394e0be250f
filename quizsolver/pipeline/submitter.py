"""Post the computed answer to the submission endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from quizsolver.config import Settings
from quizsolver.pipeline.deadline import Deadline
from quizsolver.pipeline.errors import SubmissionFailure
from quizsolver.pipeline.models import Answer, Instruction, SubmissionResult, TaskRequest

logger = logging.getLogger(__name__)


class Submitter:
    """Best-effort final stage: every failure is recorded on the result, none is raised."""

    def __init__(self, settings: Settings) -> None:
        self._default_url = settings.default_submit_url
        self._timeout = settings.request_timeout

    def endpoint_for(self, instruction: Instruction) -> str:
        return instruction.submission_url or self._default_url

    @staticmethod
    def build_payload(answer: Answer, instruction: Instruction, identity: TaskRequest) -> dict[str, Any]:
        return {
            "email": identity.email,
            "secret": identity.secret,
            "url": instruction.resource_url,
            "answer": answer.value,
        }

    async def _post(self, endpoint: str, payload: dict[str, Any], deadline: Deadline) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=deadline.clamp(self._timeout)) as client:
                return await client.post(endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise SubmissionFailure(f"{type(exc).__name__}: {exc}") from exc

    async def submit(
        self,
        answer: Answer,
        instruction: Instruction,
        identity: TaskRequest,
        deadline: Deadline,
    ) -> SubmissionResult:
        endpoint = self.endpoint_for(instruction)
        result = SubmissionResult(endpoint=endpoint)
        logger.info(f"[SUBMIT] POST {endpoint} answer={answer.value}")

        try:
            response = await self._post(endpoint, self.build_payload(answer, instruction, identity), deadline)
            result.status_code = response.status_code
            try:
                result.body = response.json()
            except ValueError as exc:
                raise SubmissionFailure(f"Response is not JSON: {exc}") from exc
        except SubmissionFailure as exc:
            result.error = str(exc)
            logger.error(f"[SUBMIT] Submit error (HTTP {result.status_code}): {result.error}")
            return result

        logger.info(f"[SUBMIT] Submit response (HTTP {result.status_code}): {result.body}")
        return result
