"""Services Layer — field generation and the language-policy enforcement loop.

Invariants:
    - Services orchestrate IO around pure core functions; policy decisions
      (validate, retry or not, which instruction) stay in core/
"""
