"""Task file models and JSON persistence."""
