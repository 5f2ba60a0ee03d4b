"""Prometheus metrics from FortiGate REST monitor API documents."""

__version__ = "0.1.0"