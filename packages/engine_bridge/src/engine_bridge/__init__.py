"""
Engine Bridge - connects a running event-processing engine to the outside world.

This package provides:
- Event codec (JSON documents <-> engine attribute maps and results)
- Engine contracts and an in-memory development provider
- Lazy, scope-bound engine context lifecycle
- Action dispatch to external HTTP endpoints, with correlation propagation
- HTTP surface (FastAPI) and CLI

Correlation identifiers come from basecore.correlation; this package never
keeps request identity in globals of its own.
"""
