# --------------------------------------------------------------
# File: storage.py
# Description: Lectura y escritura de contenedores en disco.
# --------------------------------------------------------------
"""Funciones auxiliares de entrada/salida para los ficheros de texto cifrados."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Union

__all__ = ["read_all", "write_all"]

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def read_all(path: PathLike) -> bytes:
    """Lee el fichero completo en memoria.

    Args:
        path (PathLike): Ruta del contenedor.

    Returns:
        bytes: Contenido íntegro del fichero.

    Raises:
        OSError: Si la ruta no existe o no se puede leer.

    """

    with open(path, "rb") as handler:
        data = handler.read()
    logger.debug("Leídos %d bytes de %s", len(data), path)
    return data


def write_all(path: PathLike, data: bytes) -> None:
    """Escribe el contenedor sustituyendo cualquier fichero previo.

    Escribe primero en un temporal único del mismo directorio y lo renombra;
    si algo falla, el temporal se borra. No hace `fsync`, así que un corte
    de energía puede dejar el fichero incompleto.

    Raises:
        OSError: Por permisos, espacio en disco o directorio inexistente.

    """

    directory = os.path.dirname(os.fspath(path)) or "."
    fd, tmp_path = tempfile.mkstemp(prefix=".cryptopad-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handler:
            handler.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug("Escritos %d bytes en %s", len(data), path)
