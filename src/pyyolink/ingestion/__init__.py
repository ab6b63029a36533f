"""Ingestion layer.

This package contains the adapters that turn raw poll responses and push
reports into canonical readings, plus the outcome classifier that runs
before normalization.
"""

__all__: list[str] = []
