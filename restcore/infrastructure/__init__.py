"""Infrastructure layer: persistence backing the REST core's collaborators.

- **Database access**: Synchronous SQLAlchemy 2.0 engine and sessions
- **Repository pattern**: Generic lookups for mapped entities
- **User store**: The ``users`` table behind HTTP Basic authentication
"""
