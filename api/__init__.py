# --------------------------------------------------------------
# File: __init__.py
# Description: Capa de servicios expuesta a la interfaz del editor.
# --------------------------------------------------------------
"""Inicializa el paquete `api` con los servicios de ficheros."""

__all__ = ["services"]
