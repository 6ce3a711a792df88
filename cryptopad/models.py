# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos comunes utilizados por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic para modos de guardado y variantes de contenedor."""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from cryptopad import config

IV_SIZE = 16
BLOCK_SIZE = 16
SALT_SIZE = 16
NONCE_SIZE = 12


class KdfParams(BaseModel):
    """Parámetros de coste de Argon2id almacenados en la cabecera v2.

    Attributes:
        t (int): Coste temporal en iteraciones.
        m (int): Memoria en KiB consumida durante la derivación.
        p (int): Paralelismo configurado.

    """

    model_config = ConfigDict(frozen=True)

    t: int = Field(default_factory=lambda: config.ARGON2_T, ge=1)
    m: int = Field(default_factory=lambda: config.ARGON2_M, ge=8)
    p: int = Field(default_factory=lambda: config.ARGON2_P, ge=1, le=255)

    @model_validator(mode="after")
    def _check_memory(self) -> "KdfParams":
        # Argon2 exige al menos 8 KiB por carril.
        if self.m < 8 * self.p:
            raise ValueError("m debe ser al menos 8 * p")
        return self


class PlainMode(BaseModel):
    """Guarda el texto tal cual, sin cabecera ni cifrado."""

    model_config = ConfigDict(frozen=True)


class EncryptedMode(BaseModel):
    """Guarda con el formato legado `0xFF || IV || AES-256-CBC`."""

    model_config = ConfigDict(frozen=True)

    password: SecretStr


class SealedMode(BaseModel):
    """Guarda con el formato v2 autenticado (Argon2id + AES-256-GCM)."""

    model_config = ConfigDict(frozen=True)

    password: SecretStr
    kdf_params: KdfParams = Field(default_factory=KdfParams)


SaveOption = Union[PlainMode, EncryptedMode, SealedMode]


class PlainFile(BaseModel):
    """Contenedor en claro ya resuelto como texto."""

    model_config = ConfigDict(frozen=True)

    text: str


class EncryptedCandidate(BaseModel):
    """Contenedor legado pendiente de la passphrase del usuario.

    Attributes:
        iv (bytes): Vector de inicialización de 128 bits leído del fichero.
        ciphertext (bytes): Datos cifrados con AES-256-CBC y relleno PKCS7.

    """

    model_config = ConfigDict(frozen=True)

    iv: bytes
    ciphertext: bytes

    @field_validator("iv")
    @classmethod
    def _check_iv(cls, value: bytes) -> bytes:
        if len(value) != IV_SIZE:
            raise ValueError(f"el IV debe tener {IV_SIZE} bytes")
        return value


class SealedCandidate(BaseModel):
    """Contenedor v2 pendiente de la passphrase del usuario.

    Attributes:
        aad (bytes): Cabecera previa al nonce, autenticada por GCM.
        kdf_params (KdfParams): Coste Argon2id con el que se selló.
        salt (bytes): Salt aleatoria de la derivación.
        nonce (bytes): Nonce AES-GCM de 96 bits.
        ciphertext (bytes): Datos cifrados seguidos de la etiqueta GCM.

    """

    model_config = ConfigDict(frozen=True)

    aad: bytes
    kdf_params: KdfParams
    salt: bytes
    nonce: bytes
    ciphertext: bytes


Container = Union[PlainFile, EncryptedCandidate, SealedCandidate]
