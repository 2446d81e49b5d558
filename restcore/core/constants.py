"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"
DEFAULT_HSTS_MAX_AGE = 31536000  # 1 year in seconds

# HTTP Basic authentication
BASIC_AUTH_SCHEME = "Basic "
DEFAULT_AUTH_REALM = "Provide your credentials."

# HTTP methods understood by the dispatcher
SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD")

# Methods allowed on a collection (requests without a resource identifier)
COLLECTION_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "POST"})

# Methods whose request body is passed to the action
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
