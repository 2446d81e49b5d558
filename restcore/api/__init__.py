"""HTTP transport for the REST dispatch core, built on FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **routes**: Catch-all REST routes that hand requests to ``RestService``
- **middleware**: Cross-cutting concerns for all requests
  - Security headers
  - Request context with correlation ID tracking
  - Structured request logging with timing
  - Transport-level exception handlers
- **schemas**: The standardized error response format
- **utils**: orjson-backed responses

The core is synchronous; routes run it in the thread pool so the event
loop is never blocked by password hashing or database lookups.
"""
