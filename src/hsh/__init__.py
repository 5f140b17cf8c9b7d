"""hsh - an interactive command shell front end."""

__version__ = "0.1.0"
