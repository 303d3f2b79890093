"""Core infrastructure: configuration, logging, output."""
