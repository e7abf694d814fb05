"""Module coordinate algebra and version resolution."""
