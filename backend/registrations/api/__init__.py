"""API Layer - FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON, except exports which return raw bytes

Design Decisions:
    - Thin routes delegate to the record store and the export services
"""
