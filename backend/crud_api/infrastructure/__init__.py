"""Infrastructure Layer: store connectivity and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/ or services/
    - Every driver exception leaving this layer is mapped to core/errors.py
"""
