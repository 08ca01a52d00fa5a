"""HTML rendering of the catalog and assembly of the static build output."""
