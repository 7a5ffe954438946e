# src/atlas_settings/core/config/loader.py
"""
Loader canônico da configuração do store do Atlas Settings.

Este módulo resolve a configuração efetiva (`StoreConfig`) utilizada para
construir um `SettingsStore`.

A configuração é resolvida a partir de:
    - defaults embutidos (`DEFAULT_STORE_CONFIG`, sempre presentes)
    - um arquivo de defaults (opcional; obrigatório existir quando informado)
    - um arquivo local de overrides (opcional; ignorado quando ausente)

Formato esperado (YAML):

    settings_store:
      root_tag: AtlasSettings
      build_identity: null        # null = versão do pacote
      lock:
        name: 8C1F6E2A-3B7D-4F59-A0E4-5D2B9C7E1F38
        directory: null           # null = diretório temporário do sistema
      write:
        indent: 2
        backup_corrupt: true

Invariantes:
    - O resultado é sempre um `StoreConfig` imutável
    - Overrides nunca mutam os defaults
    - Chaves desconhecidas sob `settings_store` são rejeitadas

Limites explícitos:
    - Não decide o path do documento de configurações
    - Não adquire locks nem toca o documento
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from atlas_settings.core.document.model import DEFAULT_ROOT_TAG
from atlas_settings.core.lock.guard import DEFAULT_LOCK_NAME

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnknownConfigKeyError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


DEFAULT_STORE_CONFIG: Dict[str, Any] = {
    "settings_store": {
        "root_tag": DEFAULT_ROOT_TAG,
        "build_identity": None,
        "lock": {
            "name": DEFAULT_LOCK_NAME,
            "directory": None,
        },
        "write": {
            "indent": 2,
            "backup_corrupt": True,
        },
    }
}

_ALLOWED_KEYS = {
    "": {"root_tag", "build_identity", "lock", "write"},
    "lock": {"name", "directory"},
    "write": {"indent", "backup_corrupt"},
}


@dataclass(frozen=True)
class StoreConfig:
    """Configuração efetiva e imutável de um `SettingsStore`."""

    root_tag: str = DEFAULT_ROOT_TAG
    lock_name: str = DEFAULT_LOCK_NAME
    lock_directory: Optional[str] = None
    indent: int = 2
    backup_corrupt: bool = True
    build_identity: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        """
        Constrói um `StoreConfig` a partir da configuração resolvida.

        Raises:
            UnknownConfigKeyError: Chave não reconhecida sob `settings_store`.
            InvalidConfigValueError: Valor com tipo ou faixa inválida.
        """
        section = data.get("settings_store") or {}
        if not isinstance(section, dict):
            raise InvalidConfigValueError("`settings_store` deve ser um mapa")

        _check_keys(section, "")
        lock = section.get("lock") or {}
        write = section.get("write") or {}
        _check_keys(lock, "lock")
        _check_keys(write, "write")

        root_tag = section.get("root_tag")
        if not isinstance(root_tag, str) or not root_tag.strip():
            raise InvalidConfigValueError("`settings_store.root_tag` deve ser uma string não vazia")

        lock_name = lock.get("name")
        if not isinstance(lock_name, str) or not lock_name.strip():
            raise InvalidConfigValueError("`settings_store.lock.name` deve ser uma string não vazia")

        lock_directory = lock.get("directory")
        if lock_directory is not None and not isinstance(lock_directory, str):
            raise InvalidConfigValueError("`settings_store.lock.directory` deve ser string ou null")

        indent = write.get("indent")
        if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
            raise InvalidConfigValueError(f"`settings_store.write.indent` inválido: {indent!r}")

        backup_corrupt = write.get("backup_corrupt")
        if not isinstance(backup_corrupt, bool):
            raise InvalidConfigValueError("`settings_store.write.backup_corrupt` deve ser booleano")

        build_identity = section.get("build_identity")
        if build_identity is not None:
            build_identity = str(build_identity)

        return cls(
            root_tag=root_tag,
            lock_name=lock_name,
            lock_directory=lock_directory,
            indent=indent,
            backup_corrupt=backup_corrupt,
            build_identity=build_identity,
        )


def _check_keys(section: Dict[str, Any], scope: str) -> None:
    if not isinstance(section, dict):
        raise InvalidConfigValueError(f"`settings_store.{scope}` deve ser um mapa")
    unknown = sorted(set(section) - _ALLOWED_KEYS[scope])
    if unknown:
        prefix = f"settings_store.{scope}." if scope else "settings_store."
        raise UnknownConfigKeyError(
            "Chaves desconhecidas: " + ", ".join(prefix + key for key in unknown)
        )


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - O formato é decidido exclusivamente pela extensão
        - Arquivos vazios são interpretados como dicionários vazios
        - O conteúdo raiz deve ser um dicionário (`dict`)

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
        data = json.loads(text) if text.strip() else None

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_store_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> StoreConfig:
    """
    Carrega e resolve a configuração efetiva do store.

    Política de resolução:
        - `DEFAULT_STORE_CONFIG` é sempre a base
        - `defaults_path`, quando informado, deve existir e é aplicado sobre a base
        - `local_path`, quando informado e existente, tem prioridade sobre ambos
        - A resolução utiliza `deep_merge` com política determinística

    Args:
        defaults_path (Optional[str]): Arquivo de defaults do projeto.
        local_path (Optional[str]): Arquivo opcional de overrides locais.

    Returns:
        StoreConfig: Configuração efetiva.

    Raises:
        DefaultsNotFoundError: Se `defaults_path` foi informado e não existe.
        UnsupportedConfigFormatError: Se o formato de algum arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo de algum arquivo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        UnknownConfigKeyError: Se houver chaves desconhecidas.
        InvalidConfigValueError: Se algum valor for inválido.
    """

    effective = DEFAULT_STORE_CONFIG

    if defaults_path is not None:
        effective = deep_merge(effective, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return StoreConfig.from_dict(effective)
