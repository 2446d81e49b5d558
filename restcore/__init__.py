"""Restcore - REST dispatch core with HTTP Basic authentication.

Restcore turns routed HTTP requests into controller actions following REST
conventions. A request names a resource, an optional identifier and an
optional sub-property; the core resolves the resource controller, runs the
pre-action filters and invokes the derived action.

Architecture Overview:
- **REST Layer**: Controller resolution, filter chain, action dispatch and
  error translation (synchronous, one pipeline invocation per request)
- **API Layer**: FastAPI transport that routes URLs into the REST layer
- **Core Layer**: Configuration, logging, exceptions and request context
- **Infrastructure Layer**: User persistence backing the authentication filter

Every failure except the authentication challenge is converted into a
structured error response, so nothing escapes the pipeline as a raw
exception.
"""
