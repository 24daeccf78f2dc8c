"""Geometry, filter and compositing core (no UI dependencies)."""
