"""Route Modules — one file per resource (health, graph, trust, seeders, reviews).

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic
"""
