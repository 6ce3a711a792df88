# --------------------------------------------------------------
# File: container.py
# Description: Codificación y detección del formato de fichero en disco.
# --------------------------------------------------------------
"""Serializa texto en contenedores planos, legados o sellados y los reconoce.

Formatos soportados (el primer byte selecciona la variante):

* Plano: bytes UTF-8 del texto, sin cabecera.
* Legado: ``0xFF || IV(16) || AES-256-CBC(PKCS7)``, clave SHA-256 de la
  passphrase. Sin autenticación.
* Sellado (v2): ``0xFE || 0x02 || t(4) || m(4) || p(1) || salt(16) ||
  nonce(12) || AES-256-GCM``, clave Argon2id; todo lo anterior al nonce
  se autentica como AAD.

Ni ``0xFF`` ni ``0xFE`` pueden aparecer en UTF-8 bien formado, así que un
fichero plano válido nunca se confunde con uno cifrado.
"""

import logging
import os
import struct

from pydantic import ValidationError

from cryptopad import config
from cryptopad.crypto_kdf import PasswordToKey, derive_kek, derive_key
from cryptopad.crypto_sym import (
    aes_gcm_decrypt_with_key,
    aes_gcm_encrypt_with_key,
    decrypt_cbc,
    encrypt_cbc,
    generate_iv,
)
from cryptopad.errors import DecryptionError, EncryptionError
from cryptopad.models import (
    IV_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    Container,
    EncryptedCandidate,
    EncryptedMode,
    KdfParams,
    PlainFile,
    PlainMode,
    SaveOption,
    SealedCandidate,
    SealedMode,
)

logger = logging.getLogger(__name__)

ENCRYPTED_TAG = 0xFF
SEALED_TAG = 0xFE
SEALED_VERSION = 0x02

_PARAMS = struct.Struct(">BBIIB")
SEALED_HEADER_SIZE = _PARAMS.size + SALT_SIZE + NONCE_SIZE
GCM_TAG_SIZE = 16
_U32_MAX = 2**32 - 1


def encode(text: str, mode: SaveOption, kdf: PasswordToKey = derive_key) -> bytes:
    """Construye los bytes del contenedor para `text` según el modo elegido.

    Cada llamada cifrada genera un IV (o salt y nonce) nuevo.

    Args:
        text (str): Contenido a guardar.
        mode (SaveOption): `PlainMode`, `EncryptedMode` o `SealedMode`.
        kdf (PasswordToKey): Derivación usada por el formato legado.

    Returns:
        bytes: Contenedor listo para escribir en disco.

    Raises:
        EncryptionError: Tamaños inválidos o coste Argon2id que no podría
        volver a abrirse con la configuración actual.

    """

    data = text.encode("utf-8")
    if isinstance(mode, PlainMode):
        return data
    if isinstance(mode, EncryptedMode):
        key = kdf(mode.password.get_secret_value())
        iv = generate_iv()
        return bytes([ENCRYPTED_TAG]) + iv + encrypt_cbc(data, key, iv)
    if isinstance(mode, SealedMode):
        return _seal(data, mode)
    raise TypeError(f"Modo de guardado no soportado: {type(mode).__name__}")


def _check_writable_params(params: KdfParams) -> None:
    # Un fichero que `_parse_sealed` rechazaría no debe llegar a escribirse.
    if params.t > min(config.ARGON2_MAX_T, _U32_MAX) or params.m > min(config.ARGON2_MAX_M, _U32_MAX):
        raise EncryptionError(
            f"Coste Argon2id fuera de límites: t={params.t} m={params.m}KiB "
            f"(máximo t={config.ARGON2_MAX_T} m={config.ARGON2_MAX_M}KiB)"
        )


def _seal(data: bytes, mode: SealedMode) -> bytes:
    params = mode.kdf_params
    _check_writable_params(params)
    salt = os.urandom(SALT_SIZE)
    key = derive_kek(mode.password.get_secret_value(), salt, params)
    aad = _PARAMS.pack(SEALED_TAG, SEALED_VERSION, params.t, params.m, params.p) + salt
    nonce, ciphertext = aes_gcm_encrypt_with_key(key, data, aad)
    logger.debug("Sellado v2 t=%d m=%dKiB p=%d, %d bytes", params.t, params.m, params.p, len(ciphertext))
    return aad + nonce + ciphertext


def decode_tag(data: bytes) -> Container:
    """Clasifica los bytes leídos de disco inspeccionando el primer byte.

    Args:
        data (bytes): Contenido completo del fichero.

    Returns:
        Container: `PlainFile`, `EncryptedCandidate` o `SealedCandidate`.

    Raises:
        DecryptionError: Fichero vacío, cabecera truncada o texto no UTF-8.

    """

    if len(data) < 1:
        raise DecryptionError("Fichero vacío: no hay byte de formato")

    tag = data[0]
    if tag == ENCRYPTED_TAG:
        if len(data) < 1 + IV_SIZE:
            raise DecryptionError("Contenedor cifrado truncado: falta el IV")
        logger.debug("Contenedor legado, %d bytes cifrados", len(data) - 1 - IV_SIZE)
        return EncryptedCandidate(iv=data[1 : 1 + IV_SIZE], ciphertext=data[1 + IV_SIZE :])
    if tag == SEALED_TAG:
        return _parse_sealed(data)

    try:
        return PlainFile(text=data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DecryptionError("El fichero plano no es UTF-8 válido") from exc


classify = decode_tag


def _parse_sealed(data: bytes) -> SealedCandidate:
    if len(data) < SEALED_HEADER_SIZE + GCM_TAG_SIZE:
        raise DecryptionError("Contenedor sellado truncado")

    _, version, t, m, p = _PARAMS.unpack_from(data)
    if version != SEALED_VERSION:
        raise DecryptionError(f"Versión de contenedor desconocida: {version}")
    if t > config.ARGON2_MAX_T or m > config.ARGON2_MAX_M:
        raise DecryptionError(f"Coste Argon2id fuera de límites: t={t} m={m}KiB")
    try:
        params = KdfParams(t=t, m=m, p=p)
    except ValidationError as exc:
        raise DecryptionError("Parámetros Argon2id inválidos en la cabecera") from exc

    salt_end = _PARAMS.size + SALT_SIZE
    return SealedCandidate(
        aad=data[:salt_end],
        kdf_params=params,
        salt=data[_PARAMS.size : salt_end],
        nonce=data[salt_end:SEALED_HEADER_SIZE],
        ciphertext=data[SEALED_HEADER_SIZE:],
    )


def try_decrypt(candidate: Container, password: str, kdf: PasswordToKey = derive_key) -> str:
    """Intenta descifrar un contenedor cifrado con la passphrase indicada.

    No reintenta: una passphrase incorrecta se propaga como
    `DecryptionError` y es el llamante quien vuelve a pedirla.

    Args:
        candidate (Container): Resultado cifrado de `decode_tag`.
        password (str): Passphrase introducida por el usuario.
        kdf (PasswordToKey): Derivación usada al guardar un fichero legado.

    Returns:
        str: Texto original.

    Raises:
        DecryptionError: Passphrase incorrecta o contenido corrupto.

    """

    if isinstance(candidate, EncryptedCandidate):
        return decrypt_cbc(candidate.ciphertext, kdf(password), candidate.iv)
    if isinstance(candidate, SealedCandidate):
        key = derive_kek(password, candidate.salt, candidate.kdf_params)
        data = aes_gcm_decrypt_with_key(key, candidate.nonce, candidate.ciphertext, candidate.aad)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("El contenido descifrado no es UTF-8 válido") from exc
    raise TypeError(f"El contenedor no está cifrado: {type(candidate).__name__}")
