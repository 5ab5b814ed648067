"""agen — distribute agent, skill and workflow templates into projects."""

__version__ = "0.1.0"
