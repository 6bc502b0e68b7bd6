"""Course catalogue: authoring, publication and search."""
