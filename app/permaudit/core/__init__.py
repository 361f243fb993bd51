"""Core infrastructure: paths and settings."""
