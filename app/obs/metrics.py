"""In-process counters and latency histograms.

No external dependencies. A single lock guards both stores, which is plenty
for one uvicorn worker.
"""

from typing import Dict, Any, Optional, Tuple, List
import threading


LabelsKey = Tuple[Tuple[str, str], ...]

_LOCK = threading.Lock()

# (metric, labels) -> count
_COUNTERS: Dict[Tuple[str, LabelsKey], int] = {}

# (metric, labels) -> {"counts": [...], "sum_ms": float}; the provider call dominates latency
_LATENCY_BINS_MS: List[int] = [100, 250, 500, 1000, 2500, 5000, 10000, 30000]
_HISTOGRAMS: Dict[Tuple[str, LabelsKey], Dict[str, Any]] = {}


def _labels_key(labels: Optional[Dict[str, str]]) -> LabelsKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _bin_index(value_ms: float) -> int:
    for i, upper in enumerate(_LATENCY_BINS_MS):
        if value_ms <= upper:
            return i
    return len(_LATENCY_BINS_MS)


def inc_counter(metric: str, labels: Optional[Dict[str, str]] = None) -> None:
    key = (metric, _labels_key(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0) + 1


def record_timing(metric: str, value_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
    if value_ms is None:
        return
    key = (metric, _labels_key(labels))
    with _LOCK:
        entry = _HISTOGRAMS.get(key)
        if entry is None:
            entry = {"counts": [0] * (len(_LATENCY_BINS_MS) + 1), "sum_ms": 0.0}
            _HISTOGRAMS[key] = entry
        entry["counts"][_bin_index(value_ms)] += 1
        entry["sum_ms"] += float(value_ms)


def get_metrics_snapshot() -> Dict[str, Any]:
    with _LOCK:
        counters = [
            {"name": name, "labels": dict(labels), "value": value}
            for (name, labels), value in _COUNTERS.items()
        ]
        histograms = [
            {
                "name": name,
                "labels": dict(labels),
                "bins_ms": list(_LATENCY_BINS_MS),
                "counts": list(entry["counts"]),
                "sum_ms": entry["sum_ms"],
            }
            for (name, labels), entry in _HISTOGRAMS.items()
        ]
    return {"counters": counters, "histograms": histograms}


def counter_value(metric: str, labels: Optional[Dict[str, str]] = None) -> int:
    with _LOCK:
        return _COUNTERS.get((metric, _labels_key(labels)), 0)


def reset_metrics() -> None:
    with _LOCK:
        _COUNTERS.clear()
        _HISTOGRAMS.clear()
