"""Numeric core: precision backend, classification, viewport mapping, sampling."""
