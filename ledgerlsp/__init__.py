"""Journal model, balance checks, indexes, diagnostics and formatting for hledger journals."""

__version__ = "0.1.0"