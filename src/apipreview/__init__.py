"""apipreview: live build/classify/annotate core for API-description previews."""

__version__ = "0.1.0"
