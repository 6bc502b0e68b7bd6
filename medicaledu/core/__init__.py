"""
Core layer.

- ``domain``: entities, value objects, enums, events and domain errors.
- ``application``: requests, handlers, the mediator and its pipeline.
"""
