"""
Feature modules live under this package.

Each module owns its models, records, storage gateway, service and HTTP handlers,
while reusing platform primitives (config, DB session, errors, metrics).
"""
