"""Contract Engine: provider contract generation on AWS."""

__version__ = "0.1.0"
