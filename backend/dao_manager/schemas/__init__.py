"""Pydantic Schemas — dossier, task, team and derived-result models.

Invariants:
    - Python attributes are snake_case; JSON uses the camelCase wire aliases
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Schemas double as the domain records passed through core/ functions,
      the ORM row in models/ is only a persistence shape
"""
