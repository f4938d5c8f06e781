"""ORM Models — SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models imported here so Base.metadata is complete before create_all/autogenerate
"""

from dao_manager.models.dao import DaoRecord  # noqa: F401
