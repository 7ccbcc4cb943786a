# agroclima_ceara/errors.py
from __future__ import annotations


class AgroClimaError(Exception):
    """Erro base do AgroClima Ceará."""


class FetchError(AgroClimaError, RuntimeError):
    """Falha ao obter dados de um local (API fora do ar, status != 200, timeout)."""


class InputFileNotFoundError(AgroClimaError, FileNotFoundError):
    """Arquivo de entrada obrigatório não encontrado (erro fatal de configuração)."""


class DataQualityError(AgroClimaError, ValueError):
    """Valor não numérico ou perfil de cultura inválido."""
