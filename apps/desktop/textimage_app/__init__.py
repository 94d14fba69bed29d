"""TextImage desktop app."""
