"""Generate access-gated data room sites from exported Drive files."""

__version__ = "0.1.0"
