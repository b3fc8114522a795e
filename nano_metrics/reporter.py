"""
Prometheus reporter: builds the catalog's collectors and applies observations.
"""

import threading
from collections import Counter as Tally
from typing import Dict, Any, Iterable, Mapping, Optional, Tuple

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge
from prometheus_summary import Summary

from .catalog import CATALOG, NAMESPACE, MetricDefinition, MetricKind, definitions_by_kind, validate_catalog
from .errors import RegistrationError
from .labels import LabelReconciler
from .logging import get_logger

GAME_LABEL = "game"
SERVER_TYPE_LABEL = "serverType"

# Reports under names missing from the catalog, by kind only
UNKNOWN_REPORTS_SUBSYSTEM = "reporter"
UNKNOWN_REPORTS_NAME = "unknown_metric_reports"
KIND_LABEL = "kind"
UNKNOWN_REPORTS_FULL_NAME = f"{NAMESPACE}_{UNKNOWN_REPORTS_SUBSYSTEM}_{UNKNOWN_REPORTS_NAME}"

_COLLECTOR_TYPES = {
    MetricKind.COUNTER: Counter,
    MetricKind.GAUGE: Gauge,
    MetricKind.SUMMARY: Summary,
}


class PrometheusReporter:
    """Reports counters, gauges and summaries to a Prometheus collector registry.

    Every observation is completed with the additional label defaults and the
    constant labels before it reaches its collector, so all series of one
    metric carry the same label set. Collectors do their own locking; the
    reporter adds none around observations.
    """

    def __init__(
        self,
        game: str,
        server_type: str,
        const_labels: Optional[Mapping[str, str]] = None,
        additional_labels: Optional[Mapping[str, str]] = None,
        registry: Optional[CollectorRegistry] = None,
        definitions: Iterable[MetricDefinition] = CATALOG,
    ):
        self.game = game
        self.server_type = server_type
        self.registry = registry if registry is not None else REGISTRY
        self.definitions = validate_catalog(definitions)
        self.logger = get_logger("nano_metrics.reporter")

        # Copy so the caller's mapping is left as it was passed in
        constant_labels = dict(const_labels or {})
        constant_labels[GAME_LABEL] = game
        constant_labels[SERVER_TYPE_LABEL] = server_type
        self._constant_labels = constant_labels

        self._reconciler = LabelReconciler(additional_labels)

        self._collectors: Dict[MetricKind, Dict[str, Any]] = {kind: {} for kind in MetricKind}
        self._label_names: Dict[str, Tuple[str, ...]] = {}
        self._unknown_reports: Optional[Counter] = None
        self._registered = False
        self._register_lock = threading.Lock()

        self.server = None

    @property
    def constant_labels(self) -> Dict[str, str]:
        return dict(self._constant_labels)

    @property
    def additional_label_keys(self) -> Tuple[str, ...]:
        return self._reconciler.keys

    @property
    def registered(self) -> bool:
        return self._registered

    def label_names(self, name: str) -> Tuple[str, ...]:
        """Full label name tuple a metric was registered with."""
        return self._label_names[name]

    def collector(self, kind: MetricKind, name: str):
        """Get a registered collector by kind and name."""
        return self._collectors[kind].get(name)

    def _check_label_names(self, metric: str, groups: Iterable[Tuple[str, ...]]) -> Tuple[str, ...]:
        label_names = tuple(name for group in groups for name in group)
        duplicates = sorted(name for name, seen in Tally(label_names).items() if seen > 1)
        if duplicates:
            raise RegistrationError(
                f"Conflicting label names for metric '{metric}'",
                details={"metric": metric, "labels": duplicates}
            )
        return label_names

    def _build_label_names(self, definition: MetricDefinition) -> Tuple[str, ...]:
        return self._check_label_names(
            definition.full_name,
            (tuple(self._constant_labels), definition.labels, self._reconciler.keys),
        )

    def _build_collector(self, definition: MetricDefinition, label_names: Tuple[str, ...]):
        collector_type = _COLLECTOR_TYPES[definition.kind]
        kwargs: Dict[str, Any] = {}
        if definition.kind == MetricKind.SUMMARY:
            kwargs["invariants"] = tuple(sorted(definition.objectives.items()))
        try:
            return collector_type(
                definition.name,
                definition.help,
                labelnames=label_names,
                namespace=NAMESPACE,
                subsystem=definition.subsystem,
                registry=None,
                **kwargs
            )
        except ValueError as e:
            raise RegistrationError(
                f"Invalid definition for metric '{definition.full_name}'",
                details={"metric": definition.full_name, "error": str(e)}
            ) from e

    def _build_unknown_reports(self) -> Counter:
        label_names = self._check_label_names(UNKNOWN_REPORTS_FULL_NAME, (tuple(self._constant_labels), (KIND_LABEL,)))
        return Counter(
            UNKNOWN_REPORTS_NAME,
            "the number of reports ignored because the metric name is not in the catalog",
            labelnames=label_names,
            namespace=NAMESPACE,
            subsystem=UNKNOWN_REPORTS_SUBSYSTEM,
            registry=None,
        )

    def register_metrics(self) -> None:
        """Build every catalog collector and register all of them, or none."""
        with self._register_lock:
            if self._registered:
                raise RegistrationError("Metrics already registered for this reporter")

            collectors: Dict[MetricKind, Dict[str, Any]] = {kind: {} for kind in MetricKind}
            label_names: Dict[str, Tuple[str, ...]] = {}
            to_register = []
            for kind in (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.SUMMARY):
                for definition in definitions_by_kind(kind, self.definitions):
                    names = self._build_label_names(definition)
                    collector = self._build_collector(definition, names)
                    collectors[kind][definition.name] = collector
                    label_names[definition.name] = names
                    to_register.append((definition.full_name, collector))

            unknown_reports = self._build_unknown_reports()
            to_register.append((UNKNOWN_REPORTS_FULL_NAME, unknown_reports))

            registered = []
            for full_name, collector in to_register:
                try:
                    self.registry.register(collector)
                except ValueError as e:
                    for done in registered:
                        self.registry.unregister(done)
                    self.logger.error("Metric registration failed", metric=full_name, error=str(e))
                    raise RegistrationError(
                        f"Failed to register metric '{full_name}'",
                        details={"metric": full_name, "error": str(e)}
                    ) from e
                registered.append(collector)

            self._collectors = collectors
            self._label_names = label_names
            self._unknown_reports = unknown_reports
            self._registered = True

        self.logger.info(
            "Metrics registered",
            metrics=[full_name for full_name, _ in to_register],
            constant_labels=self.constant_labels,
            additional_labels=list(self.additional_label_keys)
        )

    def unregister_metrics(self) -> None:
        """Remove this reporter's collectors from the registry."""
        with self._register_lock:
            if not self._registered:
                return
            for collectors in self._collectors.values():
                for collector in collectors.values():
                    self.registry.unregister(collector)
            self.registry.unregister(self._unknown_reports)
            self._collectors = {kind: {} for kind in MetricKind}
            self._label_names = {}
            self._unknown_reports = None
            self._registered = False

    def _series(self, kind: MetricKind, name: str, labels: Optional[Mapping[str, str]]):
        collector = self._collectors[kind].get(name)
        if collector is None:
            unknown_reports = self._unknown_reports
            if unknown_reports is not None:
                unknown_reports.labels(kind=kind.value, **self._constant_labels).inc()
            self.logger.debug("Unknown metric ignored", metric=name, kind=kind.value)
            return None

        values = self._reconciler.reconcile(labels)
        values.update(self._constant_labels)
        return collector.labels(**values)

    def report_summary(self, metric: str, labels: Optional[Mapping[str, str]], value: float) -> None:
        """Record a sample on a summary metric."""
        series = self._series(MetricKind.SUMMARY, metric, labels)
        if series is not None:
            series.observe(value)

    def report_count(self, metric: str, labels: Optional[Mapping[str, str]], count: float) -> None:
        """Increase a counter metric by ``count``."""
        series = self._series(MetricKind.COUNTER, metric, labels)
        if series is not None:
            series.inc(count)

    def report_gauge(self, metric: str, labels: Optional[Mapping[str, str]], value: float) -> None:
        """Set a gauge metric to ``value``."""
        series = self._series(MetricKind.GAUGE, metric, labels)
        if series is not None:
            series.set(value)
