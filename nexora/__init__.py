"""Nexora Insights: marketing and market intelligence dashboard."""

__version__ = "0.3.0"
