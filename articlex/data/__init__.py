"""Bundled heuristics data (``heuristics.json``)."""
