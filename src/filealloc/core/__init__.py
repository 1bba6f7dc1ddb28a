"""Entity models and error types."""
