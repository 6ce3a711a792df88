# --------------------------------------------------------------
# File: test_container.py
# Description: Pruebas del formato en disco: plano, legado 0xFF y sellado v2.
# --------------------------------------------------------------

import struct

import pytest

from cryptopad import config
from cryptopad.container import (
    ENCRYPTED_TAG,
    SEALED_HEADER_SIZE,
    SEALED_TAG,
    classify,
    decode_tag,
    encode,
    try_decrypt,
)
from cryptopad.crypto_kdf import iterated_sha256
from cryptopad.errors import DecryptionError, EncryptionError
from cryptopad.models import (
    EncryptedCandidate,
    EncryptedMode,
    KdfParams,
    PlainFile,
    PlainMode,
    SealedCandidate,
    SealedMode,
)

TEXTS = ["Woop woop!", "línea 1\nlínea 2", "🚀" * 50, "x"]


@pytest.mark.parametrize("text", TEXTS)
def test_plain_roundtrip(text):
    """Comprueba que un fichero plano se guarde sin cabecera y se recupere igual.

    Args:
        text (str): Texto parametrizado.
    """
    data = encode(text, PlainMode())
    assert data == text.encode("utf-8")
    assert classify(data) == PlainFile(text=text)


@pytest.mark.parametrize("text", TEXTS + [""])
def test_encrypted_roundtrip(text):
    """Garantiza que el formato legado recupere el texto con la passphrase correcta.

    Args:
        text (str): Texto parametrizado, incluido el vacío.
    """
    data = encode(text, EncryptedMode(password="pass123"))
    assert data[0] == ENCRYPTED_TAG
    assert (len(data) - 17) % 16 == 0

    candidate = classify(data)
    assert isinstance(candidate, EncryptedCandidate)
    assert candidate.iv == data[1:17]
    assert candidate.ciphertext == data[17:]
    assert try_decrypt(candidate, "pass123") == text


def test_encrypted_uses_fresh_iv_each_save():
    """Dos guardados del mismo texto y passphrase no deben compartir IV."""
    mode = EncryptedMode(password="pw")
    first = encode("mismo texto", mode)
    second = encode("mismo texto", mode)
    assert first[1:17] != second[1:17]
    assert first != second


def test_encrypted_accepts_empty_password():
    """Una passphrase vacía es válida y permite recuperar el texto.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    data = encode("secreto", EncryptedMode(password=""))
    assert try_decrypt(classify(data), "") == "secreto"


def test_encrypted_wrong_password_rejected():
    """Una passphrase distinta debe producir error, nunca el texto original."""
    candidate = classify(encode("mensaje secreto", EncryptedMode(password="P1")))
    try:
        result = try_decrypt(candidate, "P2")
    except DecryptionError:
        return
    assert result != "mensaje secreto"


def test_encrypted_with_custom_kdf():
    """Comprueba que la derivación pluggable deba repetirse al abrir el fichero."""
    kdf = iterated_sha256(500)
    data = encode("texto", EncryptedMode(password="pw"), kdf=kdf)
    candidate = classify(data)
    assert try_decrypt(candidate, "pw", kdf=kdf) == "texto"
    try:
        assert try_decrypt(candidate, "pw") != "texto"
    except DecryptionError:
        pass


def test_corrupted_ciphertext_rejected_or_mismatch():
    """Alterar cualquier byte del ciphertext debe dar error o un texto distinto.

    El formato legado no está autenticado, así que ambos resultados son válidos;
    lo que nunca debe ocurrir es recuperar el texto original.
    """
    text = "contenido importante que ocupa varios bloques AES"
    data = bytearray(encode(text, EncryptedMode(password="pw")))
    for index in range(17, len(data)):
        mutated = bytearray(data)
        mutated[index] ^= 0x01
        try:
            result = try_decrypt(classify(bytes(mutated)), "pw")
        except DecryptionError:
            continue
        assert result != text


@pytest.mark.parametrize("data", [b"", bytes([ENCRYPTED_TAG]), bytes([ENCRYPTED_TAG]) + b"\x00" * 15])
def test_decode_rejects_empty_and_truncated(data):
    """Un fichero vacío o con el IV incompleto se rechaza al clasificar.

    Args:
        data (bytes): Contenido truncado parametrizado.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    with pytest.raises(DecryptionError):
        decode_tag(data)


def test_decode_tag_with_iv_only_gives_empty_ciphertext():
    """Un contenedor de 17 bytes se clasifica, pero su descifrado falla."""
    candidate = decode_tag(bytes([ENCRYPTED_TAG]) + b"\x01" * 16)
    assert isinstance(candidate, EncryptedCandidate)
    assert candidate.ciphertext == b""
    with pytest.raises(DecryptionError):
        try_decrypt(candidate, "pw")


def test_decode_rejects_non_utf8_plain():
    """Un fichero sin byte de formato que no es UTF-8 válido se rechaza.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    with pytest.raises(DecryptionError):
        decode_tag(b"\xc3\x28 texto")


def test_plain_utf8_never_starts_with_tag_bytes():
    """Los bytes 0xFE y 0xFF no aparecen en UTF-8, así que no hay ambigüedad."""
    for char in ["ÿ", "þ", "￿", "\U0010ffff"]:
        assert encode(char, PlainMode())[0] not in (ENCRYPTED_TAG, SEALED_TAG)


def test_try_decrypt_rejects_plain_candidate():
    """Pedir el descifrado de un fichero plano es un error de programación.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    with pytest.raises(TypeError):
        try_decrypt(PlainFile(text="hola"), "pw")


def test_sealed_roundtrip(cheap_params):
    """Verifica el formato v2: cabecera, parámetros y descifrado autenticado.

    Args:
        cheap_params (KdfParams): Coste Argon2id mínimo.
    """
    data = encode("texto sellado ✓", SealedMode(password="pw", kdf_params=cheap_params))
    assert data[0] == SEALED_TAG
    assert data[1] == 0x02
    candidate = classify(data)
    assert isinstance(candidate, SealedCandidate)
    assert candidate.kdf_params == cheap_params
    assert try_decrypt(candidate, "pw") == "texto sellado ✓"


def test_sealed_uses_configured_defaults():
    """Sin parámetros explícitos se usa el coste Argon2id de la configuración.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    candidate = classify(encode("x", SealedMode(password="pw")))
    assert candidate.kdf_params.t == config.ARGON2_T
    assert candidate.kdf_params.m == config.ARGON2_M


def test_sealed_wrong_password_always_rejected(cheap_params):
    """En el formato v2 una passphrase errónea falla siempre por la etiqueta GCM.

    Args:
        cheap_params (KdfParams): Coste Argon2id mínimo.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    candidate = classify(encode("texto", SealedMode(password="P1", kdf_params=cheap_params)))
    with pytest.raises(DecryptionError):
        try_decrypt(candidate, "P2")


def test_sealed_detects_any_byte_flip(cheap_params):
    """Cualquier alteración tras la cabecera de parámetros debe detectarse."""
    data = encode("texto", SealedMode(password="pw", kdf_params=cheap_params))
    for index in range(11, len(data)):
        mutated = bytearray(data)
        mutated[index] ^= 0x80
        with pytest.raises(DecryptionError):
            try_decrypt(classify(bytes(mutated)), "pw")


def test_sealed_rejects_truncated_and_unknown_version(cheap_params):
    """Una cabecera v2 truncada o de versión desconocida se rechaza.

    Args:
        cheap_params (KdfParams): Coste Argon2id mínimo.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    data = encode("texto", SealedMode(password="pw", kdf_params=cheap_params))
    with pytest.raises(DecryptionError):
        decode_tag(data[: SEALED_HEADER_SIZE + 15])
    with pytest.raises(DecryptionError):
        decode_tag(data[:1] + b"\x03" + data[2:])


def test_sealed_rejects_excessive_cost(cheap_params):
    """Una cabecera con coste desorbitado se rechaza antes de derivar la clave."""
    data = encode("texto", SealedMode(password="pw", kdf_params=cheap_params))
    huge = struct.pack(">I", config.ARGON2_MAX_M + 1)
    with pytest.raises(DecryptionError):
        decode_tag(data[:6] + huge + data[10:])


def test_sealed_rejects_zero_parallelism(cheap_params):
    """Un paralelismo 0 en la cabecera se rechaza antes de derivar la clave.

    Args:
        cheap_params (KdfParams): Coste Argon2id mínimo.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    data = encode("texto", SealedMode(password="pw", kdf_params=cheap_params))
    with pytest.raises(DecryptionError):
        decode_tag(data[:10] + b"\x00" + data[11:])


def test_password_hidden_in_repr():
    """La passphrase no aparece en la representación del modo de guardado.

    Returns:
        None: Las aserciones validan el comportamiento esperado.
    """
    assert "supersecreta" not in repr(EncryptedMode(password="supersecreta"))


@pytest.mark.parametrize(
    "params",
    [
        lambda: KdfParams(t=config.ARGON2_MAX_T + 1, m=8 * 1024, p=1),
        lambda: KdfParams(t=1, m=config.ARGON2_MAX_M + 1, p=1),
        lambda: KdfParams(t=2**32, m=8 * 1024, p=1),
    ],
)
def test_sealed_refuses_cost_it_could_not_reopen(params):
    """Un coste por encima de los límites de lectura se rechaza al guardar.

    Sin esta comprobación se escribiría un fichero que ni la passphrase
    correcta podría abrir.

    Args:
        params (Callable[[], KdfParams]): Construye parámetros fuera de límites.

    Returns:
        None: Se espera `EncryptionError` antes de derivar la clave.
    """
    with pytest.raises(EncryptionError):
        encode("texto", SealedMode(password="pw", kdf_params=params()))


def test_sealed_refuses_configured_defaults_above_ceiling(monkeypatch):
    """Unos valores por defecto mayores que el máximo configurado tampoco se escriben.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar la configuración.
    """
    monkeypatch.setattr(config, "ARGON2_T", config.ARGON2_MAX_T + 1)
    with pytest.raises(EncryptionError):
        encode("texto", SealedMode(password="pw"))


def test_sealed_accepts_cost_at_ceiling(monkeypatch):
    """El coste exactamente igual al máximo sigue siendo legible tras guardarse.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar la configuración.
    """
    monkeypatch.setattr(config, "ARGON2_MAX_T", 2)
    params = KdfParams(t=2, m=8 * 1024, p=1)
    data = encode("texto", SealedMode(password="pw", kdf_params=params))
    assert try_decrypt(classify(data), "pw") == "texto"
