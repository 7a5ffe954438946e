"""Store canônica (v1) do documento de configurações do Atlas Settings.

O store implementa o ciclo load / merge / save de seções nomeadas sobre um
único documento em disco, serializado entre threads e processos pelo
`InterprocessLockGuard`.

Decisões (v1):
- Toda operação pública adquire o lock pelo tempo inteiro da operação
- Toda escrita relê o documento do disco antes de alterá-lo; o documento
  entregue por `load` nunca é base de uma escrita
- Falhas de leitura (ausente, ilegível, malformado) degradam para um
  documento vazio; falhas de escrita sobem como `SettingsWriteError`
- O Version Stamp é regravado a cada escrita, mesmo quando o mutator não
  altera nada

Com isso, duas instâncias que atualizam seções diferentes ao mesmo tempo
nunca perdem a seção uma da outra; duas escritas da mesma seção resultam
em "última escrita vence".

Limites explícitos:
- Não interpreta nem valida o conteúdo das seções
- Não decide o path do documento
- Não mantém cache do documento entre operações
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from atlas_settings.core.config.loader import StoreConfig
from atlas_settings.core.document.codec import (
    LoadStatus,
    backup_corrupt_document,
    read_document,
    write_document,
)
from atlas_settings.core.document.model import DEFAULT_ROOT_TAG, Section, SettingsRoot
from atlas_settings.core.document.version import BuildIdentity, current_build_identity
from atlas_settings.core.errors import SettingsWriteError
from atlas_settings.core.lock.guard import DEFAULT_LOCK_NAME, InterprocessLockGuard


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Mutator = Callable[[SettingsRoot], None]


@dataclass(frozen=True)
class SettingsHandle:
    """Documento carregado por `SettingsStore.load` (somente leitura)."""

    root: SettingsRoot
    path: Path
    status: LoadStatus = LoadStatus.LOADED

    @property
    def file_name(self) -> str:
        return str(self.path)

    @property
    def recovered(self) -> bool:
        return self.status.recovered

    @property
    def version(self) -> Optional[str]:
        return self.root.version

    def section(self, name: str) -> Section:
        """Seção `name` ou uma seção vazia nova; nunca `None`."""
        return self.root.section(name)

    def __getitem__(self, name: str) -> Section:
        return self.section(name)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def section_names(self) -> List[str]:
        return self.root.section_names()


class SettingsStore:
    """Store de seções nomeadas com exclusão mútua interprocesso."""

    def __init__(
        self,
        *,
        root_tag: str = DEFAULT_ROOT_TAG,
        lock_name: str = DEFAULT_LOCK_NAME,
        lock_dir: Optional[PathLike] = None,
        build_identity: Optional[Union[BuildIdentity, str]] = None,
        indent: int = 2,
        backup_corrupt: bool = True,
    ):
        if isinstance(build_identity, str):
            build_identity = BuildIdentity.parse(build_identity)

        self.root_tag = root_tag
        self.lock_name = lock_name
        self.lock_dir = Path(lock_dir) if lock_dir is not None else None
        self.build_identity: BuildIdentity = build_identity or current_build_identity()
        self.indent = indent
        self.backup_corrupt = backup_corrupt

    @classmethod
    def from_config(cls, config: StoreConfig) -> "SettingsStore":
        return cls(
            root_tag=config.root_tag,
            lock_name=config.lock_name,
            lock_dir=config.lock_directory,
            build_identity=config.build_identity,
            indent=config.indent,
            backup_corrupt=config.backup_corrupt,
        )

    # ------------------------------------------------------------------
    # Lock
    # ------------------------------------------------------------------
    def guard(self) -> InterprocessLockGuard:
        """Novo guard para o lock deste store (não adquirido)."""
        return InterprocessLockGuard(self.lock_name, lock_dir=self.lock_dir)

    # ------------------------------------------------------------------
    # Load / Read
    # ------------------------------------------------------------------
    def load(self, path: PathLike) -> SettingsHandle:
        """Lê o documento em `path` sob o lock.

        Nunca levanta exceção por arquivo ausente, ilegível ou malformado:
        nesses casos o handle envolve uma raiz vazia e `status` indica o motivo.

        Raises:
            UnsupportedSettingsFormatError: Extensão de `path` não suportada.
        """
        with self.guard():
            result = read_document(path, self.root_tag)

        if result.status.recovered:
            logger.debug("Load de %s degradou para documento vazio (%s)", result.path, result.status.value)
        return SettingsHandle(root=result.root, path=result.path, status=result.status)

    def read_section(self, handle: SettingsHandle, name: str) -> Section:
        return handle.section(name)

    # ------------------------------------------------------------------
    # Update / Save
    # ------------------------------------------------------------------
    def update(self, mutator: Mutator, path: PathLike) -> None:
        """Ciclo re-read → stamp → mutate → write, inteiro sob o lock.

        Args:
            mutator: Recebe a raiz relida do disco e pode adicionar, substituir
                ou remover seções. Não deve chamar o store (ver `LockReentryError`).
            path: Documento de configurações.

        Raises:
            SettingsWriteError: Falha ao criar o diretório pai ou ao gravar.
            UnsupportedSettingsFormatError: Extensão de `path` não suportada.
            Exception: Qualquer exceção do mutator é propagada e nada é gravado.
        """
        with self.guard():
            result = read_document(path, self.root_tag)
            target = result.path

            if result.status.io_failure:
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise SettingsWriteError(target, f"Falha ao criar diretório {target.parent}") from e

            root = result.root
            root.stamp(self.build_identity)
            mutator(root)

            if result.status is LoadStatus.CORRUPT and self.backup_corrupt and result.raw is not None:
                backup_corrupt_document(target, result.raw)

            write_document(target, root, indent=self.indent)

    def save_section(self, section: Section, path: PathLike) -> None:
        """Substitui (na mesma posição) ou anexa `section` e grava o documento."""
        payload = section.copy()

        def _replace_or_insert(root: SettingsRoot) -> None:
            replaced = root.put(payload)
            logger.debug("Seção '%s' %s", payload.name, "substituída" if replaced else "inserida")

        self.update(_replace_or_insert, path)

    def remove_section(self, name: str, path: PathLike) -> None:
        """Remove a seção `name`; o documento é regravado mesmo se ela não existir."""

        def _remove(root: SettingsRoot) -> None:
            root.remove(name)

        self.update(_remove, path)

    def __repr__(self) -> str:
        return (
            f"SettingsStore(root_tag={self.root_tag!r}, lock_name={self.lock_name!r}, "
            f"build_identity='{self.build_identity}')"
        )
