"""Display model layer for a local knowledge-base REST API."""
