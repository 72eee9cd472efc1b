"""Settings, database, logging and security primitives."""
