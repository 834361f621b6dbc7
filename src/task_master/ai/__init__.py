"""AI provider layer: provider dispatch, bounded retries, and response normalization."""
