"""Transaction lifecycle tracking for a forking, finalizing block tree."""
