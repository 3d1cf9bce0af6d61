from .abstract_repositories import AbstractSnapshotRepository

__all__ = [
    "AbstractSnapshotRepository",
]
