"""Core infrastructure: type reflection, configuration and logging."""
