from __future__ import annotations

import logging
from typing import List

from letterpress.app.events.emitter import AssemblyEventEmitter
from letterpress.app.events.models import AssemblyEvent, AssemblyEventType

logger = logging.getLogger(__name__)


class MemoryEventEmitter(AssemblyEventEmitter):
    """
    Records emitted events in order.

    Closes itself once the build completes or fails; later events are
    dropped.
    """

    def __init__(self) -> None:
        self._events: List[AssemblyEvent] = []
        self._closed = False

    @property
    def events(self) -> List[AssemblyEvent]:
        return list(self._events)

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: AssemblyEvent) -> None:
        if self._closed:
            logger.debug("Dropping %s after close", event.event_type.value)
            return

        self._events.append(event)

        if event.event_type in {
            AssemblyEventType.BUILD_COMPLETED,
            AssemblyEventType.BUILD_FAILED,
        }:
            self._closed = True

    def of_type(self, event_type: AssemblyEventType) -> List[AssemblyEvent]:
        return [e for e in self._events if e.event_type == event_type]
