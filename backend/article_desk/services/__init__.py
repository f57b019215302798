"""Services Layer — article repository and upload gateway.

Invariants:
    - Services raise ArticleDeskError subclasses only; routes never catch
"""
