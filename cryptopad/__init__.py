# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública del motor de cifrado de ficheros de texto.
# --------------------------------------------------------------
"""Inicializa el paquete `cryptopad` y documenta sus módulos principales."""

__all__ = [
    "config",
    "container",
    "crypto_kdf",
    "crypto_sym",
    "errors",
    "models",
    "storage",
]
