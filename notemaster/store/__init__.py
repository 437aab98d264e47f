# Store package
from notemaster.store.database import DocumentStore, get_store
from notemaster.store.legacy import LegacyStore
from notemaster.store.migration import LegacyMigrator, MigrationReport

__all__ = ["DocumentStore", "LegacyMigrator", "LegacyStore", "MigrationReport", "get_store"]
