"""Configuration constants."""
