"""
Product store gateways.

Modules:
    base     - PersistenceGateway contract
    supabase - PostgREST implementation (production)
    memory   - In-process implementation (tests, local runs)
"""

from .base import PersistenceGateway
from .memory import InMemoryGateway
from .supabase import SupabaseGateway

__all__ = ['InMemoryGateway', 'PersistenceGateway', 'SupabaseGateway']
