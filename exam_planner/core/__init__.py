"""Core planning logic independent of persistence."""
