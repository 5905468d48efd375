"""Row-normalization and plan-vs-actual aggregation for scanned inspection reports."""

__version__ = "0.1.0"
