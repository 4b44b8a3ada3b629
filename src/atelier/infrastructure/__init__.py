"""Infrastructure layer: adapters for the database and external services."""
