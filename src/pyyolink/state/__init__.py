"""State/store layer.

This package is the single source of truth for how readings from the
poll and push transports are merged into the per-device state record,
and for when change notifications are emitted.
"""
