"""Utility helpers for printcrop."""
