"""Services — the content workflow engine and its transaction scope.

Invariants:
    - Services depend on core protocols, never on concrete infrastructure
"""
