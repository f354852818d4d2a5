"""Admin principals stored in the registry."""
