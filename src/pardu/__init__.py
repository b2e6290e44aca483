"""Parallel disk usage scanner and browser."""
