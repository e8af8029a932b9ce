"""Coloring, frame assembly and image export."""
