"""Database config document: models, schema, validation, persistence and store."""
