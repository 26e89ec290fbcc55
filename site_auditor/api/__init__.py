"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from site_auditor.api import app

    uvicorn site_auditor.api:app --reload
"""

from site_auditor.api.app import app

__all__ = ["app"]
