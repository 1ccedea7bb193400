"""Pydantic Schemas — request/response contracts for the trust-graph API.

Invariants:
    - Schemas validate at the system boundary only; services work with dicts and ORM rows
"""
