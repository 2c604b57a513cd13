from shopsense.repositories.base import ShopRepository
from shopsense.repositories.memory import InMemoryRepository
from shopsense.repositories.sql import SqlRepository

__all__ = ["ShopRepository", "InMemoryRepository", "SqlRepository"]
