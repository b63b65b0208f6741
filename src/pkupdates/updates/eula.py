"""License agreement (EULA) negotiation.

This module provides:
- EulaDecision: Outcome of a license prompt
- EulaRequest: One license agreement required by an install attempt
- EulaNegotiator: FIFO queue surfacing one request at a time

The daemon may report several agreements in one failed install pass. They
are shown to the user strictly in arrival order, one at a time; the next one
is surfaced only after the current one has been resolved.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EulaDecision(IntEnum):
    """User decision on a license agreement."""

    PENDING = auto()
    ACCEPTED = auto()
    DECLINED = auto()


@dataclass
class EulaRequest:
    """A license agreement required before installing a package."""

    eula_id: str
    package_id: str
    vendor: str
    license_text: str
    decision: EulaDecision = EulaDecision.PENDING


class EulaNegotiator:
    """Queue of pending license agreements.

    Usage:
        negotiator = EulaNegotiator(on_surface=show_prompt)
        negotiator.enqueue(request)       # shown at once if it is the only one
        negotiator.resolve_head(True)     # pops it, shows the next one
    """

    def __init__(self, on_surface: Callable[[EulaRequest], None] | None = None) -> None:
        """Initialize the negotiator.

        Args:
            on_surface: Called when a request becomes the active (head) request.
        """
        self._queue: deque[EulaRequest] = deque()
        self._on_surface = on_surface

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    @property
    def head(self) -> EulaRequest | None:
        """The request currently surfaced to the user."""
        return self._queue[0] if self._queue else None

    @property
    def pending(self) -> list[EulaRequest]:
        """All queued requests in arrival order."""
        return list(self._queue)

    def is_head(self, eula_id: str) -> bool:
        """Whether the id names the currently surfaced request."""
        head = self.head
        return head is not None and head.eula_id == eula_id

    def enqueue(self, request: EulaRequest) -> bool:
        """Append a request; surface it if nothing else is pending.

        Returns:
            False if a request with the same id is already queued.
        """
        if any(r.eula_id == request.eula_id for r in self._queue):
            logger.debug("EULA %s already queued", request.eula_id)
            return False

        self._queue.append(request)
        logger.info(
            "EULA %s required for %s (%d pending)",
            request.eula_id,
            request.package_id,
            len(self._queue),
        )
        if len(self._queue) == 1:
            self._surface(request)
        return True

    def resolve_head(self, agreed: bool) -> EulaRequest:
        """Pop the surfaced request with the user's decision.

        The next request, if any, is surfaced.

        Raises:
            LookupError: If nothing is queued.
        """
        if not self._queue:
            raise LookupError("No pending EULA")

        request = self._queue.popleft()
        request.decision = EulaDecision.ACCEPTED if agreed else EulaDecision.DECLINED
        logger.info("EULA %s %s", request.eula_id, request.decision.name.lower())

        if self._queue:
            self._surface(self._queue[0])
        return request

    def clear(self) -> list[EulaRequest]:
        """Discard all pending requests.

        Returns:
            The discarded requests.
        """
        dropped = list(self._queue)
        self._queue.clear()
        if dropped:
            logger.info("Discarded %d pending EULA(s)", len(dropped))
        return dropped

    def _surface(self, request: EulaRequest) -> None:
        if self._on_surface:
            self._on_surface(request)
