"""Infrastructure layer: database engine, schema, and repositories."""
