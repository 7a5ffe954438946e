# src/atlas_settings/core/document/model.py
"""
Modelo em memória do Documento de Configuração.

Componentes principais:
    - Section      → payload nomeado e opaco
    - SettingsRoot → nó raiz: tag fixa, Version Stamp e seções por nome

Invariantes:
    - Uma raiz possui no máximo uma seção por nome
    - Substituir uma seção existente preserva sua posição; uma seção nova
      é anexada ao final
    - Seções entregues ao chamador são cópias: mutá-las não altera a raiz

Limites explícitos:
    - Não lê nem grava arquivos (ver `codec`)
    - Não inspeciona nem valida o conteúdo das seções
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from atlas_settings.core.errors import InvalidSectionNameError

from .version import BuildIdentity


DEFAULT_ROOT_TAG = "AtlasSettings"
VERSION_KEY = "version"
SECTIONS_KEY = "sections"


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidSectionNameError(f"Nome de seção inválido: {name!r}")
    return name


@dataclass
class Section:
    """
    Payload estruturado e opaco identificado por `name`.

    `payload` pode ser qualquer estrutura serializável (mapas, listas,
    escalares). Uma seção vazia tem payload `{}`.
    """

    name: str
    payload: Any = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_name(self.name)
        if self.payload is None:
            self.payload = {}

    @property
    def is_empty(self) -> bool:
        return self.payload in ({}, [], "")

    def copy(self) -> "Section":
        return Section(self.name, deepcopy(self.payload))


class SettingsRoot:
    """
    Nó raiz do Documento de Configuração.

    É o objeto entregue ao mutator de `SettingsStore.update`, que pode
    adicionar, substituir e remover seções livremente. O Version Stamp só
    é alterado via `stamp()`.
    """

    def __init__(
        self,
        tag: str = DEFAULT_ROOT_TAG,
        *,
        version: Optional[str] = None,
        sections: Optional[Dict[str, Any]] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        self._tag = tag
        self._version = version
        # atributos extras da raiz gravados por outras versões; preservados como estão
        self._attributes: Dict[str, Any] = deepcopy(attributes) if attributes else {}
        self._sections: Dict[str, Any] = {}
        for name, payload in (sections or {}).items():
            self._sections[_check_name(name)] = deepcopy(payload) if payload is not None else {}

    # ------------------------------------------------------------------
    # Atributos
    # ------------------------------------------------------------------
    @property
    def tag(self) -> str:
        return self._tag

    @property
    def version(self) -> Optional[str]:
        return self._version

    @property
    def attributes(self) -> Dict[str, Any]:
        return deepcopy(self._attributes)

    def stamp(self, identity: BuildIdentity) -> None:
        """Sobrescreve o Version Stamp com `identity`."""
        self._version = str(identity)

    # ------------------------------------------------------------------
    # Seções
    # ------------------------------------------------------------------
    def __contains__(self, name: object) -> bool:
        return name in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        for name in list(self._sections):
            yield self.section(name)

    def section_names(self) -> List[str]:
        return list(self._sections)

    def get(self, name: str) -> Optional[Section]:
        """Retorna uma cópia da seção `name`, ou `None` se ausente."""
        if name not in self._sections:
            return None
        return Section(name, deepcopy(self._sections[name]))

    def section(self, name: str) -> Section:
        """Retorna uma cópia da seção `name`, ou uma seção vazia nova se ausente."""
        found = self.get(_check_name(name))
        return found if found is not None else Section(name)

    def put(self, section: Section) -> bool:
        """
        Substitui a seção de mesmo nome (mantendo a posição) ou a anexa.

        Returns:
            bool: True se uma seção existente foi substituída.
        """
        if not isinstance(section, Section):
            raise TypeError(f"Esperado Section, recebido: {type(section).__name__}")
        replaced = section.name in self._sections
        self._sections[section.name] = deepcopy(section.payload)
        return replaced

    def remove(self, name: str) -> bool:
        """Remove a seção `name`. Retorna False se ela não existia."""
        if name not in self._sections:
            return False
        del self._sections[name]
        return True

    # ------------------------------------------------------------------
    # Serialização
    # ------------------------------------------------------------------
    def to_document(self) -> Dict[str, Any]:
        """Representação serializável: `{tag: {"version": ..., "sections": {...}}}`."""
        body: Dict[str, Any] = {}
        if self._version is not None:
            body[VERSION_KEY] = self._version
        body.update(deepcopy(self._attributes))
        body[SECTIONS_KEY] = deepcopy(self._sections)
        return {self._tag: body}

    def copy(self) -> "SettingsRoot":
        return SettingsRoot(
            self._tag,
            version=self._version,
            sections=self._sections,
            attributes=self._attributes,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SettingsRoot):
            return NotImplemented
        return self.to_document() == other.to_document()

    def __repr__(self) -> str:
        return f"SettingsRoot(tag={self._tag!r}, version={self._version!r}, sections={self.section_names()!r})"
