"""Organizations module: the registry of tenants and their lifecycle."""
