"""Convert Signal plain-text exports into LaTeX documents."""

__version__ = "0.1.0"
