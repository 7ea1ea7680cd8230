"""Gerenciamento de correlation_id para rastreamento de gestos e operações.

Cada gesto de arrastar recebe um id `gst_...` e cada operação de
criação/edição/remoção um id `op_...`. O id ativo é injetado em todos os
logs pelo `ContextFilter`.
Usa ContextVar para ser async-safe: tasks concorrentes não compartilham id.

Uso:
    from scheduling.observability import reset_correlation_id, set_correlation_id

    token = set_correlation_id(generate_correlation_id("op"))
    try:
        # escrever no store
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

# ContextVar para correlation_id (async-safe)
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual.

    Returns:
        correlation_id ou string vazia se não definido.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo id de operação.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id(kind: str = "op") -> str:
    """Gera um novo id prefixado (`gst_` para gestos, `op_` para operações)."""
    return f"{kind}_{uuid.uuid4().hex[:16]}"
