"""Creative store: brief intelligence and placement-specific creative generation."""
