"""Infrastructure Layer — document store, asset storage and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external failures mapped to StoreError before leaving this layer
"""
