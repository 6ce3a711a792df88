# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para abaratar Argon2id y aislar la configuración.
# --------------------------------------------------------------

from typing import Iterator

import pytest

from cryptopad import config
from cryptopad.models import KdfParams


@pytest.fixture(autouse=True)
def _cheap_argon2(monkeypatch) -> Iterator[None]:
    """Reduce el coste Argon2id por defecto para que las pruebas sean rápidas.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar atributos de módulo.

    Returns:
        Iterator[None]: Control del fixture autouse durante cada test.
    """
    monkeypatch.setattr(config, "ARGON2_T", 1)
    monkeypatch.setattr(config, "ARGON2_M", 8 * 1024)
    monkeypatch.setattr(config, "ARGON2_P", 1)
    yield


@pytest.fixture
def cheap_params() -> KdfParams:
    """Parámetros Argon2id mínimos para sellar contenedores en pruebas."""
    return KdfParams(t=1, m=8 * 1024, p=1)
