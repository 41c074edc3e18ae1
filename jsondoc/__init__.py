"""Generate HTML documentation of JSON bodies from Go struct declarations."""

__version__ = "0.4.0"
