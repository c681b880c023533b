"""Domain layer - library indexing and audio streaming."""
