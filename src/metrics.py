"""In-process shop metrics built on the standard library.

Counters, gauges and histograms are kept in a module-level registry and
can be rendered in the Prometheus text exposition format with
:func:`generate_metrics_text`.  The shop updates them on every
reservation and checkout; nothing here talks to the network.
"""

from collections import defaultdict
from threading import Lock
from typing import Dict, Iterable, List, Tuple


LabelValues = Tuple[str, ...]


class Metric:
    """Base class for all metrics."""

    kind = "untyped"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        self._lock = Lock()
        _METRIC_REGISTRY.append(self)

    def _label_tuple(self, labels: Dict[str, str]) -> LabelValues:
        return tuple(str(labels.get(k, "")) for k in self.label_names)

    def _format_labels(self, label_values: LabelValues, **extra: str) -> str:
        pairs = [f'{name}="{value}"' for name, value in zip(self.label_names, label_values)]
        pairs.extend(f'{name}="{value}"' for name, value in extra.items())
        if not pairs:
            return ""
        return "{" + ",".join(pairs) + "}"

    def _header(self) -> List[str]:
        return [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} {self.kind}"]

    def to_prometheus(self) -> List[str]:
        """Return a list of strings in Prometheus exposition format."""
        raise NotImplementedError


class Counter(Metric):
    """Monotonic counter.  ``SHOP_BUY_TOTAL.inc(outcome="ok")``."""

    kind = "counter"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelValues, int] = defaultdict(int)

    def inc(self, amount: int = 1, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        key = self._label_tuple(labels)
        with self._lock:
            self._values[key] += amount

    def value(self, **labels: str) -> int:
        with self._lock:
            return self._values.get(self._label_tuple(labels), 0)

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        with self._lock:
            for label_values, value in self._values.items():
                lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Gauge(Metric):
    """Point-in-time value that may go up or down."""

    kind = "gauge"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelValues, float] = {}

    def set(self, value: float, **labels: str) -> None:
        key = self._label_tuple(labels)
        with self._lock:
            self._values[key] = float(value)

    def value(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(self._label_tuple(labels), 0.0)

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        with self._lock:
            for label_values, value in self._values.items():
                lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Histogram(Metric):
    """Histogram with fixed ascending bucket upper bounds.

    Observations above the largest bound only land in the ``+Inf`` bucket.
    """

    kind = "histogram"

    def __init__(self, name: str, description: str, buckets: Iterable[float], label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self.buckets = sorted(float(b) for b in buckets)
        # counts[labels][i] = observations that fall in bucket i (non-cumulative)
        self.counts: Dict[LabelValues, List[int]] = defaultdict(lambda: [0] * len(self.buckets))
        self.sums: Dict[LabelValues, float] = defaultdict(float)
        self.total_counts: Dict[LabelValues, int] = defaultdict(int)

    def observe(self, value: float, **labels: str) -> None:
        key = self._label_tuple(labels)
        with self._lock:
            for idx, upper in enumerate(self.buckets):
                if value <= upper:
                    self.counts[key][idx] += 1
                    break
            self.total_counts[key] += 1
            self.sums[key] += float(value)

    def count(self, **labels: str) -> int:
        with self._lock:
            return self.total_counts.get(self._label_tuple(labels), 0)

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        with self._lock:
            for label_values, total in self.total_counts.items():
                cumulative = 0
                for idx, upper in enumerate(self.buckets):
                    cumulative += self.counts[label_values][idx]
                    labels = self._format_labels(label_values, le=str(upper))
                    lines.append(f"{self.name}_bucket{labels} {cumulative}")
                inf_labels = self._format_labels(label_values, le="+Inf")
                lines.append(f"{self.name}_bucket{inf_labels} {total}")
                plain = self._format_labels(label_values)
                lines.append(f"{self.name}_sum{plain} {self.sums[label_values]}")
                lines.append(f"{self.name}_count{plain} {total}")
        return lines


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> bytes:
    """Render every registered metric in the Prometheus text format."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines).encode("utf-8")


# -----------------------------------------------------------------------------
# Metrics updated by shop.Shop
# -----------------------------------------------------------------------------

# Reservations, labelled by outcome ("ok" or a ShopError code)
SHOP_BUY_TOTAL = Counter(
    name="shop_buy_total",
    description="Total number of reservation attempts",
    label_names=["outcome"],
)

# Checkouts, labelled by outcome ("ok" or a ShopError code)
SHOP_CHECKOUT_TOTAL = Counter(
    name="shop_checkout_total",
    description="Total number of checkout attempts",
    label_names=["outcome"],
)

# Amount charged per successful checkout
SHOP_CHECKOUT_AMOUNT = Histogram(
    name="shop_checkout_amount",
    description="Amount charged by successful checkouts",
    buckets=[0, 1_000, 5_000, 10_000, 50_000, 100_000, 1_000_000],
)

# Units currently in stock per product, keyed by shop name.  Shops sharing a
# name share series, so give each live shop its own name.
SHOP_STOCK_LEVEL = Gauge(
    name="shop_stock_level",
    description="Units in stock per shop and product",
    label_names=["shop", "product"],
)
