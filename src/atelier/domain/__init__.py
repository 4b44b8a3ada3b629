"""Domain layer: entities, invariants and repository interfaces."""
