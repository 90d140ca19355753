"""Ledger layer package for read-side performance aggregation."""

from .interfaces import HoldingPerformance, PerformanceCalculatorPort
from .performance import ledger_compute_holdings_performance

__all__ = [
	"HoldingPerformance",
	"PerformanceCalculatorPort",
	"ledger_compute_holdings_performance",
]
