"""
Application layer.

Requests (commands and queries) are dispatched by the ``Mediator`` through a
fixed chain of pipeline behaviors to exactly one handler.
"""
