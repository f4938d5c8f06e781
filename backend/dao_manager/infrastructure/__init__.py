"""Infrastructure Layer — default implementations of the core boundary Protocols.

Invariants:
    - Infrastructure never imports from services/
    - Every adapter satisfies a Protocol from core/repository_protocols.py
"""
