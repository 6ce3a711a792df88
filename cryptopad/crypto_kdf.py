# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de claves simétricas a partir de la passphrase.
# --------------------------------------------------------------
"""Funciones de derivación de claves para el formato legado y el v2."""

import hashlib
from typing import Callable

from argon2.low_level import Type, hash_secret_raw

from cryptopad.models import KdfParams

KEY_SIZE = 32

# Cualquier función passphrase -> 32 bytes puede sustituir a `derive_key`.
PasswordToKey = Callable[[str], bytes]


def derive_key(password: str) -> bytes:
    """Deriva la clave del formato legado con una única pasada SHA-256.

    Sin salt ni iteraciones: la misma passphrase produce siempre la misma
    clave, lo que permite reconstruirla al abrir el fichero. Es débil frente
    a fuerza bruta offline y se conserva por compatibilidad.

    Args:
        password (str): Passphrase del usuario, admite cadena vacía.

    Returns:
        bytes: Digest de 32 bytes usado directamente como clave AES-256.

    """

    return hashlib.sha256(password.encode("utf-8")).digest()


def iterated_sha256(rounds: int) -> PasswordToKey:
    """Construye una derivación que encadena `rounds` pasadas SHA-256.

    Args:
        rounds (int): Número total de pasadas, al menos 1.

    Returns:
        PasswordToKey: Función compatible con `derive_key`.

    """

    if rounds < 1:
        raise ValueError("rounds debe ser al menos 1")

    def _derive(password: str) -> bytes:
        digest = derive_key(password)
        for _ in range(rounds - 1):
            digest = hashlib.sha256(digest).digest()
        return digest

    return _derive


def derive_kek(password: str, salt: bytes, params: KdfParams) -> bytes:
    """Deriva la clave del formato sellado usando Argon2id.

    Args:
        password (str): Passphrase de entrada del usuario.
        salt (bytes): Salt aleatoria guardada en la cabecera.
        params (KdfParams): Coste temporal, memoria y paralelismo.

    Returns:
        bytes: Clave simétrica de 32 bytes.

    """

    return hash_secret_raw(
        password.encode("utf-8"),
        salt,
        time_cost=params.t,
        memory_cost=params.m,
        parallelism=params.p,
        hash_len=KEY_SIZE,
        type=Type.ID,
    )
