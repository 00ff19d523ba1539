"""Configuração do pytest do interbox-core."""

import sys
from pathlib import Path

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Os serviços usam asyncio diretamente; roda testes anyio só em asyncio."""
    return "asyncio"
