"""Content store, documents, email and identity integrations."""
