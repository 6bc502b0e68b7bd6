"""HTTP routers; one per feature, mounted under ``/api`` by ``create_app``."""
