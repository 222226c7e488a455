"""Domain models: catalog records and query-time value objects."""
