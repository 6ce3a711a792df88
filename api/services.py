# --------------------------------------------------------------
# File: services.py
# Description: Servicios de guardado y apertura de ficheros para la interfaz.
# --------------------------------------------------------------
"""Funciones de la capa de servicios que consume la ventana del editor."""

import logging
from typing import Optional

from cryptopad import container, storage
from cryptopad.crypto_kdf import PasswordToKey, derive_key
from cryptopad.errors import DecryptionError
from cryptopad.models import Container, PlainFile, SaveOption
from cryptopad.storage import PathLike

logger = logging.getLogger(__name__)


def save(path: PathLike, text: str, mode: SaveOption, kdf: PasswordToKey = derive_key) -> None:
    """Codifica `text` con el modo elegido y lo escribe en `path`.

    Args:
        path (PathLike): Fichero de destino; se sobrescribe si existe.
        text (str): Contenido del editor.
        mode (SaveOption): Modo plano, legado o sellado.
        kdf (PasswordToKey): Derivación para el modo legado.

    Raises:
        EncryptionError: Si falla la preparación del cifrado.
        OSError: Si no se puede escribir el fichero.

    """

    data = container.encode(text, mode, kdf)
    storage.write_all(path, data)
    logger.info("Guardado %s (%s, %d bytes)", path, type(mode).__name__, len(data))


def load_raw(path: PathLike) -> bytes:
    """Devuelve los bytes del contenedor sin interpretarlos."""

    return storage.read_all(path)


def classify(data: bytes) -> Container:
    """Distingue un fichero plano de uno cifrado (ver `container.decode_tag`)."""

    return container.decode_tag(data)


def decrypt_candidate(
    candidate: Container, password: str, kdf: PasswordToKey = derive_key
) -> str:
    """Descifra un candidato con la passphrase introducida por el usuario.

    Returns:
        str: Texto original completo.

    Raises:
        DecryptionError: Passphrase incorrecta o fichero dañado; la interfaz
        debe volver a pedir la passphrase.

    """

    return container.try_decrypt(candidate, password, kdf)


def load_file(
    path: PathLike, password: Optional[str] = None, kdf: PasswordToKey = derive_key
) -> str:
    """Lee, clasifica y, si procede, descifra un fichero en una sola llamada.

    Args:
        path (PathLike): Fichero a abrir.
        password (Optional[str]): Passphrase; se ignora en ficheros planos.
        kdf (PasswordToKey): Derivación usada al guardar un fichero legado.

    Returns:
        str: Texto del fichero.

    Raises:
        DecryptionError: Contenedor inválido, passphrase ausente o incorrecta.
        OSError: Si no se puede leer el fichero.

    """

    candidate = classify(load_raw(path))
    if isinstance(candidate, PlainFile):
        return candidate.text
    if password is None:
        raise DecryptionError("El fichero está cifrado y no se ha indicado passphrase")
    return decrypt_candidate(candidate, password, kdf)
