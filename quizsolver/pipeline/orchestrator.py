"""Task orchestrator: runs one quiz task end to end under a fixed budget.

Pipeline
--------
    navigate -> decode -> resolve -> fetch -> compute answer -> submit

The orchestrator is the only component that owns the task budget.  Before
starting it checks how much of the budget is left since the task was
accepted; with ``safety_margin`` or less remaining nothing runs.  Otherwise
the whole pipeline is wrapped in one ``asyncio.wait_for`` that leaves
``cleanup_slack`` seconds for teardown.  The budget is coarse: a slow
navigation can starve every later stage.

``process`` never raises to its caller.  Every ending, good or bad, becomes a
:class:`~quizsolver.pipeline.models.TaskReport` that is logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from quizsolver.config import Settings
from quizsolver.pipeline import decoder, resolver
from quizsolver.pipeline.answer import AnswerEngine
from quizsolver.pipeline.deadline import Deadline
from quizsolver.pipeline.errors import (
    BudgetExceeded,
    FetchFailure,
    NavigationFailure,
    UnsupportedResourceKind,
)
from quizsolver.pipeline.fetcher import ResourceFetcher
from quizsolver.pipeline.models import TaskOutcome, TaskReport, TaskRequest
from quizsolver.pipeline.navigator import PageNavigator
from quizsolver.pipeline.submitter import Submitter

logger = logging.getLogger(__name__)


class TaskOrchestrator:
    """Sequence the pipeline stages for one task at a time.

    Stages are injected so tests (and the CLI) can swap any of them; by
    default each is built from *settings*.  The orchestrator holds no
    per-task state, so one instance serves any number of concurrent tasks.
    """

    def __init__(
        self,
        settings: Settings,
        navigator: Optional[PageNavigator] = None,
        fetcher: Optional[ResourceFetcher] = None,
        engine: Optional[AnswerEngine] = None,
        submitter: Optional[Submitter] = None,
    ) -> None:
        self.settings = settings
        self.navigator = navigator or PageNavigator(settings)
        self.fetcher = fetcher or ResourceFetcher(settings)
        self.engine = engine or AnswerEngine()
        self.submitter = submitter or Submitter(settings)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def process(self, task: TaskRequest, accepted_at: Optional[float] = None) -> TaskReport:
        """Run *task* to completion or failure.  Never raises.

        Args:
            task: The validated request.
            accepted_at: ``time.monotonic()`` stamp of request acceptance.
                Defaults to now.
        """
        deadline = Deadline.start(self.settings.total_budget, started_at=accepted_at)
        remaining = deadline.remaining()

        if remaining <= self.settings.safety_margin:
            report = TaskReport(
                url=task.url,
                outcome=TaskOutcome.BUDGET_EXCEEDED,
                error="Not enough time remaining to process the quiz",
                elapsed=deadline.elapsed(),
            )
            logger.error(f"[TASK] {report.error} ({remaining:.1f}s left): {task.url}")
            return report

        try:
            report = await asyncio.wait_for(
                self._run_pipeline(task, deadline),
                timeout=remaining - self.settings.cleanup_slack,
            )
        except asyncio.TimeoutError:
            exc = BudgetExceeded(
                f"Timeout (pipeline) after {remaining - self.settings.cleanup_slack:.1f}s"
            )
            report = self._failed(task, TaskOutcome.BUDGET_EXCEEDED, exc)
        except BudgetExceeded as exc:
            report = self._failed(task, TaskOutcome.BUDGET_EXCEEDED, exc)
        except NavigationFailure as exc:
            report = self._failed(task, TaskOutcome.NAVIGATION_FAILED, exc)
        except FetchFailure as exc:
            report = self._failed(task, TaskOutcome.FETCH_FAILED, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception(f"[TASK] Unexpected error processing {task.url}")
            report = self._failed(task, TaskOutcome.FAILED, exc)

        report.elapsed = deadline.elapsed()
        logger.info(
            f"[TASK] Processing finished for {task.url}: {report.outcome.value} "
            f"in {report.elapsed:.1f}s"
        )
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _failed(task: TaskRequest, outcome: TaskOutcome, exc: BaseException) -> TaskReport:
        logger.error(f"[TASK] Error processing quiz {task.url}: {exc}")
        return TaskReport(url=task.url, outcome=outcome, error=str(exc))

    async def _run_pipeline(self, task: TaskRequest, deadline: Deadline) -> TaskReport:
        extract = await self.navigator.navigate(task.url, deadline)

        payload = decoder.decode(
            extract,
            markers=self.settings.marker_substrings,
            min_length=self.settings.min_payload_length,
        )
        if payload is None:
            return TaskReport(url=task.url, outcome=TaskOutcome.NO_PAYLOAD)
        logger.info(f"[TASK] Decoded base64 text sample: {payload.text[:400]!r}")

        instruction = resolver.resolve(payload)
        if instruction is None:
            return TaskReport(url=task.url, outcome=TaskOutcome.NO_INSTRUCTION)

        resource = await self.fetcher.fetch(instruction, deadline)

        deadline.check("answer")
        try:
            answer = await self.engine.compute_answer(resource)
        except UnsupportedResourceKind as exc:
            logger.info(f"[TASK] {exc}; no answer computed")
            return TaskReport(url=task.url, outcome=TaskOutcome.UNSUPPORTED_RESOURCE)

        deadline.check("submit")
        submission = await self.submitter.submit(answer, instruction, task, deadline)

        return TaskReport(
            url=task.url,
            outcome=TaskOutcome.SUBMITTED if submission.error is None else TaskOutcome.SUBMISSION_FAILED,
            answer=answer,
            submission=submission,
            error=submission.error,
        )
