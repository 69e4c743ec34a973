from ssdnode.monitoring.logging import configure_logging
from ssdnode.monitoring.metrics import RuntimeMetrics
from ssdnode.monitoring.stats import PeriodicStatsLogger

__all__ = [
    "configure_logging",
    "RuntimeMetrics",
    "PeriodicStatsLogger",
]
