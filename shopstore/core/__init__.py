"""Entity stores and their configuration."""
