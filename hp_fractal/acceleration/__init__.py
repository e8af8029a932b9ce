"""Parallel sampling backends."""
