"""Repository adapters - Durable affiliate implementations."""

from .memory import InMemoryAffiliateRepository
from .postgres import PostgresAffiliateRepository, run_migrations

__all__ = ["InMemoryAffiliateRepository", "PostgresAffiliateRepository", "run_migrations"]
