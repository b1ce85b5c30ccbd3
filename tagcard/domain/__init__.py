"""Pure domain rules (identifier format, records, visibility)."""
