from __future__ import annotations

from typing import Protocol

from letterpress.app.events.models import AssemblyEvent


class AssemblyEventEmitter(Protocol):
    """
    Interface for broadcasting assembly observations.

    Implementations must be:
    - non-blocking
    - fail-safe (emission failures must not break the build)
    - observational only
    """

    def emit(self, event: AssemblyEvent) -> None:
        ...


class NullEventEmitter:
    """
    A safe no-op emitter. Used when nobody is listening.
    """

    def emit(self, event: AssemblyEvent) -> None:
        return
