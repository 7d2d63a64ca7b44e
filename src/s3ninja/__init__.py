"""s3ninja - filesystem-backed stored objects with properties sidecars."""

__version__ = "0.1.0"
