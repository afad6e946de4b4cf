"""Shared infrastructure: configuration, exceptions, logging, caching."""
