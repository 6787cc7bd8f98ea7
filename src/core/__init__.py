"""Core: configuration, domain and services.

Why:
- Holds what the dispatcher *is* (models, errors, concurrency rules).
- Adapters (HTTP, input files) and the CLI depend on it, never the reverse
  for the domain layer.
"""
