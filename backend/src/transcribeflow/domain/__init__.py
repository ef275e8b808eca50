"""Domain layer: file workflow, roles, errors. No database or HTTP imports."""
