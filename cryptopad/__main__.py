# --------------------------------------------------------------
# File: __main__.py
# Description: Punto de entrada de demostración: guarda y vuelve a abrir un fichero.
# --------------------------------------------------------------
"""Uso: ``python -m cryptopad RUTA TEXTO [PASSPHRASE] [--sealed]``."""

import argparse
import sys
from typing import List, Optional

from api import services
from cryptopad.config import configure_logging
from cryptopad.errors import CryptopadError
from cryptopad.models import EncryptedMode, PlainMode, SealedMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptopad",
        description="Guarda un texto (opcionalmente cifrado) y lo vuelve a abrir.",
    )
    parser.add_argument("path", help="Fichero de destino")
    parser.add_argument("text", help="Texto a guardar")
    parser.add_argument("password", nargs="?", help="Passphrase; sin ella se guarda en claro")
    parser.add_argument(
        "--sealed",
        action="store_true",
        help="Usa el formato v2 autenticado (Argon2id + AES-GCM)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.password is None:
        if args.sealed:
            print("--sealed requiere una passphrase", file=sys.stderr)
            return 2
        mode = PlainMode()
    elif args.sealed:
        mode = SealedMode(password=args.password)
    else:
        mode = EncryptedMode(password=args.password)

    try:
        services.save(args.path, args.text, mode)
        decrypted = services.load_file(args.path, args.password)
    except (CryptopadError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Decrypted text: {decrypted}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
