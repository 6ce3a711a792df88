# --------------------------------------------------------------
# File: config.py
# Description: Parámetros configurables mediante variables de entorno y .env.
# --------------------------------------------------------------
"""Configuración del coste Argon2id del formato v2 y del nivel de log."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Lee un entero del entorno devolviendo `default` si no está definido."""

    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} debe ser un entero, recibido {raw!r}") from exc


# Coste por defecto de los ficheros sellados (v2).
ARGON2_T = _env_int("CRYPTOPAD_ARGON2_T", 3)
ARGON2_M = _env_int("CRYPTOPAD_ARGON2_M", 64 * 1024)
ARGON2_P = _env_int("CRYPTOPAD_ARGON2_P", 1)

# Límites aceptados al leer una cabecera v2 de origen desconocido.
ARGON2_MAX_T = _env_int("CRYPTOPAD_ARGON2_MAX_T", 16)
ARGON2_MAX_M = _env_int("CRYPTOPAD_ARGON2_MAX_M", 1024 * 1024)

LOG_LEVEL = os.getenv("CRYPTOPAD_LOG_LEVEL", "WARNING").upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configura el logging raíz para el punto de entrada de demostración."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
