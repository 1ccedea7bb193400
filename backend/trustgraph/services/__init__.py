"""Services Layer — follows cache and fetch, graph build, score lookups, seeders, reviews.

Invariants:
    - Every service receives its collaborators in __init__ (no module-level state)
    - Wiring lives in container.py only
"""
