"""Configuration: pydantic-settings models and logging setup."""
