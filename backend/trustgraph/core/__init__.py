"""Core Layer — pure trust-graph logic: scoring, crawl bookkeeping, follow parsing.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO and no async; every function is deterministic for its inputs

Design Decisions:
    - Functional core, imperative shell: services/ does the fetching and persisting,
      core/ decides what the numbers are
"""
