"""node-starter: scaffold Node projects from preferred stack configurations."""

__version__ = "0.1.0"
