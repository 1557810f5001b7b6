"""Account endpoints under /api/auth."""
