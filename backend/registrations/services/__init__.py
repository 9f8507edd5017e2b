"""Services Layer - export renderers that turn a record snapshot into downloadable bytes.

Invariants:
    - Renderers never touch the store; they receive an already-taken snapshot
    - Layout decisions live in core/report_layout.py; services only draw
"""
