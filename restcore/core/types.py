"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for request payloads and action
parameters.
"""

from typing import Any

# Request body materialized as a key -> value mapping (form or JSON object)
type Payload = dict[str, Any]

# Parameter bag handed to a controller action, e.g. {"data": {...}}
type ActionParams = dict[str, Any]
