# src/atlas_settings/__init__.py
"""
Atlas Settings: store de configurações sincronizado entre processos.

Este pacote persiste seções nomeadas de configuração em um único documento
estruturado e garante que escritores concorrentes, inclusive várias
instâncias da mesma aplicação no mesmo host, nunca sobrescrevam
silenciosamente as seções uns dos outros.

Arquitetura em alto nível:
    - core.lock        → Lock Guard interprocesso (lock nomeado do SO)
    - core.document    → modelo do documento, Version Stamp e codec YAML/JSON
    - core.config      → configuração do próprio store (defaults + overrides)
    - persistence      → `SettingsStore`: load / save_section / update

Limites explícitos:
    - Não decide o conteúdo das seções
    - Não valida schema de seções
    - Não sincroniza pela rede
"""

import logging

from ._version import __version__
from .core.config import StoreConfig, load_store_config
from .core.document import BuildIdentity, LoadStatus, Section, SettingsRoot
from .core.errors import SettingsError, SettingsWriteError
from .core.lock import InterprocessLockGuard, acquire_lock
from .persistence import SettingsHandle, SettingsStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "BuildIdentity",
    "InterprocessLockGuard",
    "LoadStatus",
    "Section",
    "SettingsError",
    "SettingsHandle",
    "SettingsRoot",
    "SettingsStore",
    "SettingsWriteError",
    "StoreConfig",
    "acquire_lock",
    "load_store_config",
]
