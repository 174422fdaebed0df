from .in_memory_store import InMemoryHouseholdStore

__all__ = ["InMemoryHouseholdStore"]
