# media_ops/production/workflows/job_actions.py
"""
Client-side submission of workflow actions.

Mirrors what the dashboard does when a job card button is pressed: collect
notes where needed, send the action, refresh cached views, tell the user.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..actions import parse_action, requires_notes
from ..api_client import ApiError, JobCardSnapshot

logger = logging.getLogger(__name__)

JOB_CARDS_KEY = '/api/job-cards'


class ViewCache:
    """Cached API reads keyed by query path, dropped by key prefix."""

    def __init__(self):
        self._entries = {}
        self._lock = threading.Lock()

    def get_or_fetch(self, key, fetch):
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        value = fetch()
        with self._lock:
            self._entries[key] = value
        return value

    def invalidate(self, prefix):
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        logger.debug("Invalidated %d cached views under %s", len(stale), prefix)
        return len(stale)

    def __contains__(self, key):
        with self._lock:
            return key in self._entries


@dataclass
class ActionResult:
    ok: bool
    job_card: Optional[JobCardSnapshot] = None
    error: Optional[str] = None
    cancelled: bool = False


class ActionExecutor:
    def __init__(self, api, cache: ViewCache = None,
                 confirm_notes: Callable = None, notify: Callable = None):
        self.api = api
        self.cache = cache or ViewCache()
        # confirm_notes(job_card_id, action) -> str | None, blocks until the user answers
        self.confirm_notes = confirm_notes
        # notify(title, message, destructive=False)
        self.notify = notify or (lambda title, message, destructive=False: None)
        self._submitting = set()
        self._lock = threading.Lock()

    def is_submitting(self, job_card_id) -> bool:
        with self._lock:
            return job_card_id in self._submitting

    def execute(self, job_card_id, action, notes=None) -> ActionResult:
        action = parse_action(action)

        if requires_notes(action) and not (notes or '').strip():
            notes = self.confirm_notes(job_card_id, action) if self.confirm_notes else None
            if not (notes or '').strip():
                logger.info("%s on job card %s cancelled, no notes given", action.value, job_card_id)
                return ActionResult(ok=False, cancelled=True)

        with self._lock:
            if job_card_id in self._submitting:
                message = "An action is already being submitted for this job card"
                self.notify("Error", message, destructive=True)
                return ActionResult(ok=False, error=message)
            self._submitting.add(job_card_id)

        try:
            job_card = self.api.post_action(job_card_id, action.value, notes=notes)
        except ApiError as e:
            logger.warning("%s on job card %s failed: %s", action.value, job_card_id, e.message)
            self.notify("Error", e.message or "Failed to perform action", destructive=True)
            return ActionResult(ok=False, error=e.message)
        finally:
            with self._lock:
                self._submitting.discard(job_card_id)

        self.cache.invalidate(JOB_CARDS_KEY)
        self.notify("Success", "Action completed successfully")
        return ActionResult(ok=True, job_card=job_card)
