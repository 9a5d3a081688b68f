"""Configuration, logging, errors and the composition root."""
