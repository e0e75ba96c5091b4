"""Core Layer — pure domain logic, no IO, no async, no logging.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic
    - Lookup tables are built once at import and never mutated

Design Decisions:
    - Functional core separated from imperative shell: the engine is testable
      without FastAPI or Anthropic installed in the call path
"""
