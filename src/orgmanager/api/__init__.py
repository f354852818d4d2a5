"""HTTP API surface: shared dependencies and the root router."""
