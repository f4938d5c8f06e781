"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; "today" is passed in or read
      through an injected clock callable

Design Decisions:
    - Functional core separated from imperative shell: services/ fetches,
      core/ computes, services/ persists
"""
