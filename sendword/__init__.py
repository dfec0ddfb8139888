"""Retry policy with backoff for webhook-triggered command executions."""

__version__ = "0.0.2"