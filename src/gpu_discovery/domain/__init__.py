"""Domain layer for GPU discovery: entities, value objects, services and errors."""
