# src/atlas_settings/core/document/__init__.py
"""Modelo do Documento de Configuração e sua (de)serialização."""

from .codec import LoadStatus, ReadResult, SettingsFormat, read_document, write_document
from .model import DEFAULT_ROOT_TAG, Section, SettingsRoot
from .version import BuildIdentity, current_build_identity

__all__ = [
    "BuildIdentity",
    "DEFAULT_ROOT_TAG",
    "LoadStatus",
    "ReadResult",
    "Section",
    "SettingsFormat",
    "SettingsRoot",
    "current_build_identity",
    "read_document",
    "write_document",
]
