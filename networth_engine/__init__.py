"""Portfolio valuation and net worth engine."""

__version__ = "0.1.0"
