"""Read-through response cache."""
