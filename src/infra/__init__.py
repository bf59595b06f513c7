"""Infrastructure layer package.

Configuration, engine factory, ORM schema and SQL statement builders used by
the document store. Callers depend on src.ports.DocumentStorePort, not on
this package.
"""
