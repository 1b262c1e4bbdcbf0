"""Command-line tools: store seeding and one-off queries."""
