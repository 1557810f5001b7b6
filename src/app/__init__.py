"""App: orchestration, use cases and infrastructure.

Subpackages:
- bootstrap/: composition root (factories, startup, wiring)
- use_cases/: request orchestration per resource
- services/: reusable application services (verifier, guards, notifications)
- infra/: concrete IO adapters
- protocols/: contracts implemented by infra/
- domain/: documents and value objects
- observability/: request context (correlation id, caller) for logs

Pattern: app executes; api adapts; utils supports.
"""
