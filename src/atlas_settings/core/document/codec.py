# src/atlas_settings/core/document/codec.py
"""
Leitura e escrita do Documento de Configuração em disco.

Este módulo é a fronteira de I/O do store. Ele converte o arquivo em um
`SettingsRoot` e vice-versa, expondo o resultado da leitura como um
valor explícito (`ReadResult`) em vez de exceções.

Política de leitura:
    - Arquivo ausente            → `LoadStatus.MISSING`
    - Arquivo ilegível (OSError) → `LoadStatus.UNREADABLE`
    - Conteúdo malformado        → `LoadStatus.CORRUPT`
    - Em todos esses casos a raiz retornada é nova e vazia

Política de escrita:
    - Escrita atômica: arquivo temporário irmão + `os.replace`
    - Qualquer falha (serialização ou I/O) vira `SettingsWriteError`
    - O arquivo temporário é removido em caso de falha

Formatos suportados (v1), decididos pela extensão:
    - YAML (.yaml, .yml) via PyYAML
    - JSON (.json)

Limites explícitos:
    - Não adquire locks (responsabilidade do `SettingsStore`)
    - Não cria diretórios
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from atlas_settings.core.errors import (
    MalformedSettingsDocumentError,
    SettingsWriteError,
    UnsupportedSettingsFormatError,
)

from .model import SECTIONS_KEY, VERSION_KEY, SettingsRoot


logger = logging.getLogger(__name__)


class SettingsFormat(str, Enum):
    """Formatos de serialização suportados para o documento."""

    YAML = "yaml"
    JSON = "json"


_SUFFIXES = {
    ".yaml": SettingsFormat.YAML,
    ".yml": SettingsFormat.YAML,
    ".json": SettingsFormat.JSON,
}


def format_for_path(path: Union[str, Path]) -> SettingsFormat:
    """
    Resolve o formato do documento pela extensão do arquivo.

    Raises:
        UnsupportedSettingsFormatError: Extensão fora do conjunto suportado.
    """
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIXES[suffix]
    except KeyError:
        raise UnsupportedSettingsFormatError(
            f"Formato não suportado: {suffix or '(sem extensão)'} ({path})"
        ) from None


class LoadStatus(str, Enum):
    """
    Resultado da leitura do documento.

    - LOADED: documento lido e interpretado
    - MISSING: arquivo inexistente
    - UNREADABLE: erro de I/O ao ler (permissão, path é diretório, ...)
    - CORRUPT: conteúdo não interpretável
    """

    LOADED = "loaded"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    CORRUPT = "corrupt"

    @property
    def recovered(self) -> bool:
        """True quando a raiz foi substituída por um documento vazio."""
        return self is not LoadStatus.LOADED

    @property
    def io_failure(self) -> bool:
        return self in (LoadStatus.MISSING, LoadStatus.UNREADABLE)


@dataclass(frozen=True)
class ReadResult:
    """Resultado explícito de `read_document`."""

    status: LoadStatus
    root: SettingsRoot
    path: Path
    error: Optional[BaseException] = None
    # bytes originais quando status == CORRUPT (usados para backup)
    raw: Optional[bytes] = None


def parse_document(text: str, fmt: SettingsFormat, root_tag: str) -> SettingsRoot:
    """
    Interpreta o texto do documento.

    Estrutura esperada: um único nó raiz `root_tag` contendo `version`
    (opcional), `sections` (mapa nome → payload) e eventuais atributos
    extras, preservados como estão.

    Raises:
        MalformedSettingsDocumentError: Texto não interpretável ou estrutura
            diferente da esperada.
    """
    try:
        if fmt is SettingsFormat.YAML:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        raise MalformedSettingsDocumentError(f"Documento malformado: {e}") from e

    if not isinstance(data, dict) or list(data) != [root_tag]:
        raise MalformedSettingsDocumentError(
            f"Documento deve conter exatamente o nó raiz '{root_tag}'"
        )

    body = data[root_tag]
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise MalformedSettingsDocumentError(f"Nó raiz '{root_tag}' deve ser um mapa")

    sections = body.get(SECTIONS_KEY)
    if sections is None:
        sections = {}
    if not isinstance(sections, dict):
        raise MalformedSettingsDocumentError(f"'{SECTIONS_KEY}' deve ser um mapa")
    for name in sections:
        if not isinstance(name, str) or not name:
            raise MalformedSettingsDocumentError(f"Nome de seção inválido: {name!r}")

    version = body.get(VERSION_KEY)
    attributes = {
        key: value for key, value in body.items() if key not in (VERSION_KEY, SECTIONS_KEY)
    }

    return SettingsRoot(
        root_tag,
        version=str(version) if version is not None else None,
        sections=sections,
        attributes=attributes,
    )


def read_document(path: Union[str, Path], root_tag: str) -> ReadResult:
    """
    Lê o documento em `path` sem nunca propagar falhas de leitura.

    Raises:
        UnsupportedSettingsFormatError: Extensão não suportada (erro de uso).
    """
    path = Path(path)
    fmt = format_for_path(path)

    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        return ReadResult(LoadStatus.MISSING, SettingsRoot(root_tag), path, e)
    except OSError as e:
        logger.warning("Documento de configurações ilegível (%s): %s", path, e)
        return ReadResult(LoadStatus.UNREADABLE, SettingsRoot(root_tag), path, e)

    try:
        text = raw.decode("utf-8-sig")
        root = parse_document(text, fmt, root_tag)
    except (UnicodeDecodeError, MalformedSettingsDocumentError) as e:
        logger.warning("Documento de configurações corrompido (%s): %s", path, e)
        return ReadResult(LoadStatus.CORRUPT, SettingsRoot(root_tag), path, e, raw)

    return ReadResult(LoadStatus.LOADED, root, path)


def _check_json_safe(value: Any, where: str) -> None:
    # json.dumps converte chaves não-str em str e tuplas em listas sem avisar
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Chave não-str em JSON: {where}/{key!r}")
            _check_json_safe(item, f"{where}/{key}")
    elif isinstance(value, tuple):
        raise TypeError(f"Tupla não é preservada em JSON: {where or '/'}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _check_json_safe(item, f"{where}[{index}]")


def serialize_document(root: SettingsRoot, fmt: SettingsFormat, *, indent: int = 2) -> str:
    """Serializa `root` no formato pedido. Levanta TypeError/yaml.YAMLError para payloads não serializáveis."""
    document: Dict[str, Any] = root.to_document()

    if fmt is SettingsFormat.YAML:
        # PyYAML aceita indentação entre 2 e 9
        yaml_indent = indent if 2 <= indent <= 9 else 2
        return yaml.safe_dump(
            document,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            indent=yaml_indent,
        )

    _check_json_safe(document, "")
    return json.dumps(document, indent=indent or None, ensure_ascii=False) + "\n"


def write_document(
    path: Union[str, Path],
    root: SettingsRoot,
    *,
    indent: int = 2,
) -> None:
    """
    Grava `root` em `path` de forma atômica.

    Raises:
        SettingsWriteError: Payload não serializável ou falha de I/O.
    """
    path = Path(path)
    fmt = format_for_path(path)

    try:
        text = serialize_document(root, fmt, indent=indent)
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise SettingsWriteError(path, f"Conteúdo não serializável para {path}: {e}") from e

    tmp = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as e:
        with suppress(OSError):
            tmp.unlink()
        raise SettingsWriteError(path) from e

    logger.debug("Documento de configurações gravado: %s (%d bytes)", path, len(text))


def backup_corrupt_document(path: Union[str, Path], raw: bytes) -> Optional[Path]:
    """
    Copia o conteúdo corrompido para `<nome>.bak.<timestamp>` ao lado do original.

    O timestamp tem resolução de microssegundos e o arquivo é criado em modo
    exclusivo; se o nome já existir, um sufixo `-N` é acrescentado, de forma
    que um backup nunca sobrescreve outro.

    Best-effort: uma falha é registrada em WARNING e não interrompe a escrita
    que vem a seguir.
    """
    path = Path(path)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    bak = path.with_name(f"{path.name}.bak.{ts}")
    attempt = 0
    try:
        while True:
            try:
                with open(bak, "xb") as f:
                    f.write(raw)
                break
            except FileExistsError:
                attempt += 1
                bak = path.with_name(f"{path.name}.bak.{ts}-{attempt}")
    except OSError as e:
        logger.warning("Backup do documento corrompido falhou (%s): %s", bak, e)
        return None

    logger.warning("Documento corrompido preservado em %s", bak)
    return bak
