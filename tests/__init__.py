# tests/__init__.py
"""
Test Suite for MedicalEdu.

Organization:
- `core`: Domain models, caching, pipeline behaviors and request handlers.
- `adapters`: HTTP API, persistence (unit of work, audit trail) and the CLI.
"""
