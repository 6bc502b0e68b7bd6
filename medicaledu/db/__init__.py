"""
Persistence plumbing: engine and session factory, unit of work and the
audit-trail session hook.
"""
