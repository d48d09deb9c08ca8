"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (accounts, connections,
groups). Nothing in here knows about chat requests or groups.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer (logging, conflict translation)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Malformed or self-referential input
    - NotFoundError: Resource not found
    - PermissionDeniedError: Authorization failures
    - ConflictError: Invariant violations (duplicates, terminal states, etc.)

Constants (import from core.constants):
    - RELATIONSHIP_LIMITS: Field and search limits
    - get_limit: Settings-aware limit lookup
"""
