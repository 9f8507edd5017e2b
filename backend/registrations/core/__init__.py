"""Core Layer - pure domain logic for registrations, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic given their inputs (clock and ids are injected)

Design Decisions:
    - Functional core separated from imperative shell: the store owns IO, core owns rules
"""
