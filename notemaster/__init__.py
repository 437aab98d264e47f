"""
NoteMaster core.

- core/: configuration, logging, exceptions, password hashing
- models/: SQLAlchemy tables backing the document store
- schemas/: Pydantic note and setting schemas
- store/: document store, legacy key-value store, legacy migration
- repositories/: typed note and settings access
- services/: lock state machine, note queries, notebook façade
"""
