"""Pydantic Schemas - request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary; the store assumes validated input
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from core records: schemas are API contracts, Registration is the stored shape
"""
