"""Tracing utilities built on the OpenTelemetry API."""

from ._traced import traced

__all__ = ["traced"]
