"""crud-api application package: a users CRUD data service.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
