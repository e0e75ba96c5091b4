"""Infrastructure Layer — IO adapters (Anthropic client, logging setup).

Invariants:
    - Infrastructure never imports from api/ or services/
"""
