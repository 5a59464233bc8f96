"""Building blocks for a chat web app: OAuth login, auth errors, password checks,
markdown rendering, the dark-mode cookie and collaborative drawing events."""

__version__ = "0.1.0"
__all__ = ["errors", "markdown", "secure", "preferences", "drawing", "oauth"]