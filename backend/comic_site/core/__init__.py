"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions here are pure and deterministic

Design Decisions:
    - Functional core separated from the imperative shell; the shell provides
      ContentStore and TextTransformer implementations
"""
