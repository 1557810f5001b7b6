"""Crop endpoints under /api/crops."""
