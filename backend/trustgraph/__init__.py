"""Trust Graph Package — community Web-of-Trust builder and review trust scoring.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
