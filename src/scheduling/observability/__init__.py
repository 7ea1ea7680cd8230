"""Observabilidade: correlation id de gestos e operações.

Uso:
    from scheduling.observability import get_correlation_id, set_correlation_id
"""

from scheduling.observability.correlation import (
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "generate_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
