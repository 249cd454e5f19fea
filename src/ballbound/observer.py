"""
Progress Observers

The algorithms never print on their own. They report round boundaries,
discharged proofs, early termination and informational notes to an
Observer. The default Observer ignores everything; PrintObserver prints
one line per event and is installed by verbose=True on every entry
point; CollectingObserver keeps the events for later inspection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class EventKind(Enum):
    """Kind of progress event."""
    ROUND = "round"      # End of a bisection round
    PROOF = "proof"      # Something was proved (unique root, containment)
    STOP = "stop"        # Early termination (budget, stall, failed step)
    INFO = "info"        # Anything else worth reporting


@dataclass(frozen=True)
class Event:
    """One progress event."""
    kind: EventKind
    source: str
    message: str
    iteration: Optional[int] = None


class Observer:
    """Receives events. The base class ignores them."""

    def notify(self, event: Event) -> None:
        pass

    def round(self, source: str, iteration: int, message: str) -> None:
        self.notify(Event(EventKind.ROUND, source, message, iteration))

    def proof(self, source: str, message: str, iteration: Optional[int] = None) -> None:
        self.notify(Event(EventKind.PROOF, source, message, iteration))

    def stop(self, source: str, message: str, iteration: Optional[int] = None) -> None:
        self.notify(Event(EventKind.STOP, source, message, iteration))

    def info(self, source: str, message: str, iteration: Optional[int] = None) -> None:
        self.notify(Event(EventKind.INFO, source, message, iteration))


class PrintObserver(Observer):
    """Print every event on one line."""

    def notify(self, event: Event) -> None:
        prefix = f"{event.source}"
        if event.iteration is not None:
            prefix = f"{prefix} | Iteration: {event.iteration:,}"
        if event.kind is EventKind.ROUND:
            print(f"{prefix} | {event.message}")
        else:
            print(f"{prefix} | {event.kind.value.upper()}: {event.message}")


class CollectingObserver(Observer):
    """Record events in order."""

    def __init__(self):
        self.events: List[Event] = []

    def notify(self, event: Event) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> List[Event]:
        return [e for e in self.events if e.kind is kind]

    def messages(self, kind: Optional[EventKind] = None) -> List[str]:
        return [e.message for e in self.events if kind is None or e.kind is kind]


def resolve_observer(observer: Optional[Observer] = None, verbose: bool = False) -> Observer:
    """Observer to use for an entry point called with (observer, verbose)."""
    if observer is not None:
        return observer
    if verbose:
        return PrintObserver()
    return Observer()
