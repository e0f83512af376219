import pytest

from letterpress.app.assembly.builder import RegistryBuilder
from letterpress.app.errors import AssemblyError
from letterpress.app.events import AssemblyEvent, AssemblyEventType, MemoryEventEmitter
from letterpress.tests.fixtures.schema_factory import (
    ORDER,
    RECEIPT,
    order_receipt_template,
)


class ExplodingEmitter:
    def __init__(self):
        self.calls = 0

    def emit(self, event: AssemblyEvent) -> None:
        self.calls += 1
        raise RuntimeError("listener is down")


def _builder(template):
    return (
        RegistryBuilder()
        .install_document_schema(RECEIPT)
        .install_template(ORDER, template)
    )


def test_successful_build_emits_every_stage():
    emitter = MemoryEventEmitter()

    _builder(order_receipt_template()).set_event_emitter(emitter).build(build_id="b-1")

    types = [e.event_type for e in emitter.events]
    assert types[0] is AssemblyEventType.BUILD_STARTED
    assert types[-1] is AssemblyEventType.BUILD_COMPLETED
    assert [
        e.details["stage_id"] for e in emitter.of_type(AssemblyEventType.STAGE_COMPLETED)
    ] == ["sanity", "compile", "cross_validation", "unused_variables"]
    assert all(e.build_id == "b-1" for e in emitter.events)
    assert emitter.closed


def test_failed_build_stops_at_aborting_stage():
    emitter = MemoryEventEmitter()
    builder = _builder(
        order_receipt_template(fields={"title": "{{ missing }}", "footer": "{{ total }}"})
    ).set_event_emitter(emitter)

    with pytest.raises(AssemblyError):
        builder.build()

    [failed] = emitter.of_type(AssemblyEventType.BUILD_FAILED)
    assert failed.details["stage_id"] == "cross_validation"
    assert failed.details["errors"] == ["LP-E101"]
    assert not emitter.of_type(AssemblyEventType.BUILD_COMPLETED)
    assert len(emitter.of_type(AssemblyEventType.STAGE_STARTED)) == 3


def test_memory_emitter_drops_events_after_close():
    emitter = MemoryEventEmitter()
    emitter.emit(AssemblyEvent(build_id="b", event_type=AssemblyEventType.BUILD_COMPLETED))
    emitter.emit(AssemblyEvent(build_id="b", event_type=AssemblyEventType.STAGE_STARTED))

    assert len(emitter.events) == 1


def test_failing_emitter_does_not_break_build():
    emitter = ExplodingEmitter()

    registry = _builder(order_receipt_template()).set_event_emitter(emitter).build()

    assert ("Order", "Receipt") in registry
    assert emitter.calls == 10
