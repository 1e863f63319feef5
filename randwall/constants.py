"""Shared constants for randwall."""

__all__ = [
    "DEFAULT_IMAGE_HEIGHT",
    "DEFAULT_IMAGE_WIDTH",
    "HTTP_ERROR_THRESHOLD",
    "HTTP_TIMEOUT_SECONDS",
    "MAX_DECODE_ITERATIONS",
    "USER_AGENT",
]

# Image size defaults
DEFAULT_IMAGE_WIDTH = 1920
DEFAULT_IMAGE_HEIGHT = 1080

# HTTP client settings
HTTP_TIMEOUT_SECONDS = 30
HTTP_ERROR_THRESHOLD = 400
USER_AGENT = "randwall-fetcher/1.0"

# Upper bound for repeated percent-decoding in file_name()
MAX_DECODE_ITERATIONS = 256
