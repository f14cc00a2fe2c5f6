"""Domain layer: entities, the declarative catalog and services."""
