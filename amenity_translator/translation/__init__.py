"""Translation: completion clients, response parsing and batch translation."""
