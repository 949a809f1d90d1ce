"""
Application layer - use cases and per-user coordination.

Use cases wire core services to storage adapters and are the entry point
for schedulers and request handlers in the surrounding application.
"""
