"""
Fixed catalog of every metric the reporter can emit.

Names here are the keys callers pass to the ``report_*`` methods. The
catalog is read once when collectors are built and never changes afterward.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from .errors import RegistrationError

NAMESPACE = "nano"

# Metric names
RESPONSE_TIME = "response_time_ns"
PROCESS_DELAY = "handler_delay_ns"
CONNECTED_CLIENTS = "connected_clients"
GOROUTINES = "goroutines"
HEAP_SIZE = "heapsize"
HEAP_OBJECTS = "heapobjects"
MESSAGE_COUNT = "message_count"
EXCEEDED_RATE_LIMITING = "exceeded_rate_limiting"

# Quantile -> allowed absolute error
DEFAULT_OBJECTIVES: Mapping[float, float] = MappingProxyType({0.7: 0.02, 0.95: 0.005, 0.99: 0.001})

ROUTE_LABEL = "route"


class MetricKind(str, Enum):
    """Metric kinds."""
    COUNTER = "counter"
    GAUGE = "gauge"
    SUMMARY = "summary"


@dataclass(frozen=True)
class MetricDefinition:
    """Describe a metric that is registered at startup."""

    kind: MetricKind
    subsystem: str
    name: str
    help: str
    labels: Tuple[str, ...] = ()
    objectives: Mapping[float, float] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def full_name(self) -> str:
        return f"{NAMESPACE}_{self.subsystem}_{self.name}"


CATALOG: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        kind=MetricKind.SUMMARY,
        subsystem="handler",
        name=RESPONSE_TIME,
        help="the time to process a msg in nanoseconds",
        labels=(ROUTE_LABEL,),
        objectives=DEFAULT_OBJECTIVES,
    ),
    MetricDefinition(
        kind=MetricKind.SUMMARY,
        subsystem="handler",
        name=PROCESS_DELAY,
        help="the delay to start processing a msg in nanoseconds",
        labels=(ROUTE_LABEL,),
        objectives=DEFAULT_OBJECTIVES,
    ),
    MetricDefinition(
        kind=MetricKind.GAUGE,
        subsystem="acceptor",
        name=CONNECTED_CLIENTS,
        help="the number of clients connected right now",
    ),
    MetricDefinition(
        kind=MetricKind.GAUGE,
        subsystem="sys",
        name=GOROUTINES,
        help="the current number of goroutines",
    ),
    MetricDefinition(
        kind=MetricKind.GAUGE,
        subsystem="sys",
        name=HEAP_SIZE,
        help="the current heap size",
    ),
    MetricDefinition(
        kind=MetricKind.GAUGE,
        subsystem="sys",
        name=HEAP_OBJECTS,
        help="the current number of allocated heap objects",
    ),
    MetricDefinition(
        kind=MetricKind.GAUGE,
        subsystem="acceptor",
        name=MESSAGE_COUNT,
        help="the current number of processed message",
    ),
    MetricDefinition(
        kind=MetricKind.COUNTER,
        subsystem="acceptor",
        name=EXCEEDED_RATE_LIMITING,
        help="the number of blocked requests by exceeded rate limiting",
    ),
)


def validate_catalog(definitions: Iterable[MetricDefinition]) -> Tuple[MetricDefinition, ...]:
    """Check that names are unique and summary objectives are well formed."""
    definitions = tuple(definitions)

    duplicates = sorted(name for name, seen in Counter(d.name for d in definitions).items() if seen > 1)
    if duplicates:
        raise RegistrationError(
            "Duplicate metric names in catalog",
            details={"names": duplicates}
        )

    for definition in definitions:
        if definition.kind != MetricKind.SUMMARY:
            continue
        for quantile, error in definition.objectives.items():
            if not (0 < quantile < 1 and 0 < error < 1):
                raise RegistrationError(
                    f"Invalid objective for summary '{definition.name}'",
                    details={"quantile": quantile, "error": error}
                )

    return definitions


def definitions_by_kind(kind: MetricKind, definitions: Iterable[MetricDefinition] = CATALOG) -> Tuple[MetricDefinition, ...]:
    """Return the definitions of a single kind."""
    return tuple(d for d in definitions if d.kind == kind)
