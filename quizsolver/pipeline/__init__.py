"""Quiz task pipeline package.

Public API::

    from quizsolver.pipeline import TaskOrchestrator, TaskRequest
    report = await TaskOrchestrator(settings).process(TaskRequest(email, secret, url))
"""

from quizsolver.pipeline.models import TaskOutcome, TaskReport, TaskRequest
from quizsolver.pipeline.orchestrator import TaskOrchestrator

__all__ = ["TaskOrchestrator", "TaskRequest", "TaskReport", "TaskOutcome"]
