"""Core configuration, errors, logging, and protocols."""
