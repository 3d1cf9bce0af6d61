from .sqlalchemy_repositories import SQLAlchemySnapshotRepository

__all__ = [
    "SQLAlchemySnapshotRepository",
]
