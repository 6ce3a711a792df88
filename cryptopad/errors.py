# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones del motor de cifrado.
# --------------------------------------------------------------
"""Tipos de error visibles para los consumidores de `cryptopad`."""


class CryptopadError(Exception):
    """Excepción base de todos los errores criptográficos del paquete."""


class EncryptionError(CryptopadError):
    """Fallo al preparar el cifrado (tamaño de clave o IV incorrecto)."""


class DecryptionError(CryptopadError):
    """Contenedor malformado, passphrase incorrecta o datos corruptos.

    El formato legado no permite distinguir una passphrase errónea de un
    fichero dañado, por lo que ambos casos comparten este tipo.
    """
