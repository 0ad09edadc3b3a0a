"""Core configuration, logging and error types."""
