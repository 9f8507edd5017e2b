"""Infrastructure Layer - dataset persistence and cross-cutting concerns.

Invariants:
    - Only record_store touches the dataset file; codec and writer are its helpers
    - All OS/openpyxl failures are mapped to PersistenceError (core/errors.py)
"""
