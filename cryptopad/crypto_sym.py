# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-256 (CBC legado y GCM v2) para cifrar texto.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico para proteger el contenido de los ficheros."""

import logging
import os
from typing import Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cryptopad.crypto_kdf import KEY_SIZE
from cryptopad.errors import DecryptionError, EncryptionError
from cryptopad.models import BLOCK_SIZE, IV_SIZE, NONCE_SIZE

logger = logging.getLogger(__name__)


def generate_iv() -> bytes:
    """Genera un IV nuevo de 128 bits desde el CSPRNG del sistema.

    Returns:
        bytes: 16 bytes aleatorios, distintos en cada llamada.

    """

    return os.urandom(IV_SIZE)


def _cbc_cipher(key: bytes, iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(key), modes.CBC(iv))


def encrypt_cbc(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """Cifra datos con AES-256-CBC aplicando relleno PKCS7.

    Args:
        plaintext (bytes): Datos en claro que se cifrarán.
        key (bytes): Clave simétrica de 256 bits.
        iv (bytes): Vector de inicialización de 128 bits.

    Returns:
        bytes: Ciphertext cuya longitud es múltiplo de 16.

    Raises:
        EncryptionError: Si la clave o el IV no tienen el tamaño esperado.

    """

    if len(key) != KEY_SIZE:
        raise EncryptionError(f"La clave debe tener {KEY_SIZE} bytes, recibidos {len(key)}")
    if len(iv) != IV_SIZE:
        raise EncryptionError(f"El IV debe tener {IV_SIZE} bytes, recibidos {len(iv)}")

    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = _cbc_cipher(key, iv).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    logger.debug("CBC: %d bytes en claro -> %d bytes cifrados", len(plaintext), len(ciphertext))
    return ciphertext


def decrypt_cbc(ciphertext: bytes, key: bytes, iv: bytes) -> str:
    """Descifra AES-256-CBC, valida el relleno y decodifica UTF-8.

    El relleno es la única señal de integridad del formato legado: una
    passphrase errónea casi siempre lo rompe, pero no está garantizado.
    Una manipulación del ciphertext no se detecta salvo que corrompa el
    relleno o produzca UTF-8 inválido.

    Args:
        ciphertext (bytes): Datos cifrados, múltiplo de 16 bytes.
        key (bytes): Clave simétrica de 256 bits.
        iv (bytes): Vector de inicialización usado al cifrar.

    Returns:
        str: Texto original completo.

    Raises:
        DecryptionError: Longitud, relleno o UTF-8 inválidos.

    """

    if len(key) != KEY_SIZE or len(iv) != IV_SIZE:
        raise DecryptionError("Tamaño de clave o IV inválido")
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise DecryptionError(
            f"La longitud del ciphertext ({len(ciphertext)}) no es múltiplo de {BLOCK_SIZE}"
        )

    decryptor = _cbc_cipher(key, iv).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionError("Relleno inválido: passphrase incorrecta o fichero dañado") from exc

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionError("El contenido descifrado no es UTF-8 válido") from exc


def aes_gcm_encrypt_with_key(
    key: bytes, plaintext: bytes, aad: Optional[bytes] = None
) -> Tuple[bytes, bytes]:
    """Cifra datos con AES-256-GCM utilizando una clave proporcionada.

    Args:
        key (bytes): Clave simétrica de 256 bits.
        plaintext (bytes): Datos a cifrar.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        Tuple[bytes, bytes]: Nonce de 96 bits y ciphertext con la etiqueta al final.

    """

    if len(key) != KEY_SIZE:
        raise EncryptionError(f"La clave debe tener {KEY_SIZE} bytes, recibidos {len(key)}")
    nonce = os.urandom(NONCE_SIZE)
    return nonce, AESGCM(key).encrypt(nonce, plaintext, aad)


def aes_gcm_decrypt_with_key(
    key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None
) -> bytes:
    """Descifra y autentica datos AES-256-GCM.

    Raises:
        DecryptionError: Si la etiqueta no verifica.

    """

    try:
        return AESGCM(key).decrypt(nonce, ciphertext, aad)
    except InvalidTag as exc:
        raise DecryptionError("Autenticación fallida: passphrase incorrecta o fichero manipulado") from exc
