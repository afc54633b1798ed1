"""Configuration, default locations and runtime constants."""
