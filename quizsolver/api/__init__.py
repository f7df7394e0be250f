"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from quizsolver.api import app

    uvicorn quizsolver.api:app
"""

from quizsolver.api.app import app

__all__ = ["app"]
