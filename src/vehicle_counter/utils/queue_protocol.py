"""
Event transport seam between the detection loop and its consumer.

run_detection only calls put(). A multiprocessing.Queue is used between
processes; CallbackQueueAdapter hands events to a plain function instead,
which is how tests and embedding code collect them:

    events = []
    run_detection(CallbackQueueAdapter(events.append), config)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventQueue(Protocol):
    """Anything with multiprocessing.Queue's put/get signature."""

    def put(self, event: dict[str, Any] | None) -> None:
        """Deliver an event, or None once the run is over."""
        ...

    def get(
        self,
        _block: bool = True,
        _timeout: float | None = None,
    ) -> dict[str, Any] | None:
        """Next event, or None after the producer's final sentinel."""
        ...


class CallbackQueueAdapter:
    """Write-only EventQueue that calls a function for every put()."""

    def __init__(self, callback):
        self._callback = callback

    def put(self, event: dict[str, Any] | None) -> None:
        self._callback(event)

    def get(
        self,
        _block: bool = True,
        _timeout: float | None = None,
    ) -> dict[str, Any] | None:
        raise NotImplementedError("CallbackQueueAdapter only supports put()")
