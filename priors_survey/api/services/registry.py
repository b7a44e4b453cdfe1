"""In-memory registry for live TrialRunner sessions.

Notes/Assumptions:
    - Not persistent. A process restart clears the registry; the participant
      slots claimed so far stay claimed in the store.
    - Sessions untouched for `ttl_seconds` are dropped the next time a session
      is added, finished or not.
    - Not multiprocess-safe; run a single worker.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional, Tuple

from loguru import logger

from priors_survey.api.settings import settings
from priors_survey.core.trial_runner import TrialRunner


class SessionRegistry:
    """TrialRunner instances keyed by runner name, with idle expiry."""

    def __init__(
        self,
        ttl_seconds: float = settings.session_ttl_seconds,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: Dict[str, Tuple[TrialRunner, float]] = {}

    def add(self, runner: TrialRunner) -> str:
        """Store a runner and return its session ID."""
        self.prune()
        self._store[runner.name] = (runner, self._clock())
        return runner.name

    def get(self, session_id: str) -> Optional[TrialRunner]:
        """Retrieve a runner by session ID (refreshing its expiry), or None."""
        entry = self._store.get(session_id)
        if entry is None:
            return None
        runner = entry[0]
        self._store[session_id] = (runner, self._clock())
        return runner

    def remove(self, session_id: str) -> None:
        """Drop a runner by session ID (missing IDs are ignored)."""
        self._store.pop(session_id, None)

    def prune(self) -> int:
        """Drop sessions idle for longer than the TTL; returns how many."""
        cutoff = self._clock() - self.ttl_seconds
        expired = [sid for sid, (_, seen) in self._store.items() if seen < cutoff]
        for sid in expired:
            runner = self._store.pop(sid)[0]
            if not runner.completed:
                logger.warning(
                    f"Session {sid} expired unfinished at trial "
                    f"{runner.trial_number}/{runner.total_trials}."
                )
        if expired:
            logger.debug(f"Pruned {len(expired)} idle session(s).")
        return len(expired)

    def clear(self) -> None:
        """Drop every session."""
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


_registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """FastAPI dependency provider for the global registry."""
    return _registry
