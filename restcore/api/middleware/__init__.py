"""FastAPI middleware package for cross-cutting request/response concerns.

- **SecurityHeadersMiddleware**: Adds security headers (HSTS, X-Frame-Options, etc.)
- **RequestContextMiddleware**: Manages correlation IDs and request context
- **RequestLoggingMiddleware**: Structured logging with performance tracking
- **error_handler**: Transport-level exception handlers for failures raised
  outside the dispatch pipeline

Middleware are executed in a specific order:
1. Security headers (first to process, last to respond)
2. Request context (sets up correlation IDs)
3. Request logging (logs with correlation context)
"""
