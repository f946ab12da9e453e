"""Generic, result-typed repositories."""

from repokit.infrastructure.repositories.base import BaseRepository

__all__ = ["BaseRepository"]
