"""
Domain layer: entities, value objects, enums, events and domain errors.
"""
