"""Scroll-synchronized parallax scene engine."""
