"""Services Layer: the data access layer and its helpers.

Invariants:
    - Services receive their AsyncSession from the caller; they never open engines
"""
