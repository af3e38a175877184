"""Infrastructure Layer — storage backends, external service clients, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - One module per backend or client; build_repository() is the only place that
      knows which backend a setting selects
"""
