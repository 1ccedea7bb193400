"""Infrastructure Layer — database pool, relay WebSocket transport, logging, task fan-out.

Invariants:
    - Infrastructure imports from core/ only for errors and protocols
    - External failures are mapped to typed errors (DatabaseError, RelayError)
"""
