"""Baronda notification fan-out and inbox service."""
