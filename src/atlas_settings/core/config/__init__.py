# src/atlas_settings/core/config/__init__.py

"""
Camada de configuração do store do Atlas Settings.

Este pacote resolve os parâmetros operacionais do `SettingsStore`
(tag raiz do documento, nome e diretório do lock, opções de escrita e
identidade de build) a partir de defaults embutidos e arquivos opcionais.

A configuração é:
    - declarativa
    - determinística
    - resolvida via deep-merge explícito

Limites explícitos:
    - Não decide onde o documento de configurações vive (o path é sempre
      fornecido pelo chamador)
    - Não interpreta o conteúdo das seções persistidas
"""

from .loader import DEFAULT_STORE_CONFIG, StoreConfig, load_store_config
from .merge import deep_merge

__all__ = ["DEFAULT_STORE_CONFIG", "StoreConfig", "load_store_config", "deep_merge"]
