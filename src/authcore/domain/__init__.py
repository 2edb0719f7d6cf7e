"""Domain layer: entities, ports, exceptions and services."""
