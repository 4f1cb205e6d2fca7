"""Content extraction service for the content board."""
