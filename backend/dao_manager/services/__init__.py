"""Service Layer — async orchestration around the pure dossier engine.

Invariants:
    - Services fetch through Protocols, compute with core/, then persist
    - No SQL or HTTP here
"""
