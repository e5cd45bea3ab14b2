"""Infrastructure Layer - concrete collaborators and cross-cutting concerns.

Invariants:
    - Infrastructure implements core protocols; it never calls the use case
    - No implementation here may raise into the pipeline's critical path
"""
