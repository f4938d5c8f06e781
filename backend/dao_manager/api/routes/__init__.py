"""Route Modules — `daos` (dossier resource) and `health` (probes).

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Handlers delegate to DaoService; no business logic here
"""
