# src/atlas_settings/core/lock/guard.py
"""
Lock Guard interprocesso do Atlas Settings.

Este módulo serializa todos os ciclos read-modify-write sobre o documento
de configurações, entre threads e entre processos do mesmo host.

O lock é identificado por um nome fixo compartilhado por todas as
instâncias da aplicação. O nome é mapeado para um arquivo de lock
(`<lock_dir>/<nome>.lock`) e a exclusão mútua é feita pelo lock nativo
do sistema operacional sobre esse arquivo (`filelock`).

Decisões arquiteturais:
    - A aquisição bloqueia sem timeout: correção é preferida a liveness
    - Um processo que termina segurando o lock o libera implicitamente
      (o SO descarta o lock do descritor); a próxima aquisição apenas
      assume a posse, sem erro
    - Cada aquisição usa um `FileLock` novo, logo duas threads do mesmo
      processo também se excluem mutuamente
    - O arquivo de lock nunca é removido; sua existência não significa
      que o lock esteja adquirido

Invariantes:
    - `release()` executa exatamente uma vez por aquisição bem-sucedida
    - Usado como context manager, o lock é liberado em qualquer caminho
      de saída (retorno normal ou exceção)
    - Uma thread nunca tenta readquirir um lock que já possui
      (`LockReentryError` em vez de deadlock)

Limites explícitos:
    - Não é um lock de rede; processos em hosts distintos não são serializados
    - Não oferece timeout nem cancelamento
"""

from __future__ import annotations

import hashlib
import logging
import re
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Set, Union

from filelock import FileLock

from atlas_settings.core.errors import (
    InvalidLockNameError,
    LockNotHeldError,
    LockReentryError,
)


logger = logging.getLogger(__name__)

# Identificador global do lock do documento de configurações.
DEFAULT_LOCK_NAME = "8C1F6E2A-3B7D-4F59-A0E4-5D2B9C7E1F38"

_SAFE_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")

# locks adquiridos pela thread corrente (por path resolvido)
_held = threading.local()


def _held_by_current_thread() -> Set[str]:
    paths = getattr(_held, "paths", None)
    if paths is None:
        paths = set()
        _held.paths = paths
    return paths


def sanitize_lock_name(lock_name: str) -> str:
    """
    Converte um nome de lock em um nome de arquivo seguro.

    Nomes compostos apenas por `[A-Za-z0-9._-]` são usados sem alteração;
    qualquer outro nome é substituído por um hash estável, de forma que o
    mesmo nome sempre produza o mesmo arquivo em qualquer processo.
    """
    if not isinstance(lock_name, str) or not lock_name.strip():
        raise InvalidLockNameError(f"Nome de lock inválido: {lock_name!r}")

    if _SAFE_NAME_RE.match(lock_name) and lock_name not in {".", ".."}:
        return lock_name

    digest = hashlib.sha256(lock_name.encode("utf-8")).hexdigest()[:32]
    return f"lock-{digest}"


def lock_file_path(lock_name: str, lock_dir: Optional[Union[str, Path]] = None) -> Path:
    """Retorna o arquivo de lock associado a `lock_name` (default: diretório temporário do sistema)."""
    base = Path(lock_dir) if lock_dir is not None else Path(tempfile.gettempdir())
    return base / f"{sanitize_lock_name(lock_name)}.lock"


class InterprocessLockGuard:
    """
    Guard de escopo para o lock nomeado interprocesso.

    Uso:

        with InterprocessLockGuard("meu-app") as guard:
            ...  # ciclo read-modify-write

    Cada instância representa uma aquisição; depois de liberada pode ser
    adquirida novamente.
    """

    def __init__(
        self,
        lock_name: str = DEFAULT_LOCK_NAME,
        *,
        lock_dir: Optional[Union[str, Path]] = None,
    ):
        self.lock_name = lock_name
        self.lock_path = lock_file_path(lock_name, lock_dir)
        self._key = str(self.lock_path.resolve())
        self._lock: Optional[FileLock] = None
        self._owner_paths: Optional[Set[str]] = None

    @property
    def is_held(self) -> bool:
        return self._lock is not None

    def acquire(self) -> "InterprocessLockGuard":
        """
        Adquire o lock, bloqueando até que esteja livre.

        Raises:
            LockReentryError: Se este guard, ou outro guard da mesma thread,
                já possui o mesmo lock.
            OSError: Se o diretório do lock não puder ser criado.
        """
        held = _held_by_current_thread()
        if self._lock is not None or self._key in held:
            raise LockReentryError(
                f"Lock '{self.lock_name}' já adquirido pela thread corrente ({self.lock_path})"
            )

        self.lock_path.parent.mkdir(parents=True, exist_ok=True)

        lock = FileLock(str(self.lock_path), timeout=-1)
        logger.debug("Aguardando lock %s (%s)", self.lock_name, self.lock_path)
        lock.acquire()

        self._lock = lock
        self._owner_paths = held
        held.add(self._key)
        logger.debug("Lock %s adquirido", self.lock_name)
        return self

    def release(self) -> None:
        """
        Libera o lock e o descritor associado.

        Raises:
            LockNotHeldError: Se o guard não possui o lock.
        """
        if self._lock is None:
            raise LockNotHeldError(f"Lock '{self.lock_name}' não está adquirido por este guard")

        lock, self._lock = self._lock, None
        owner_paths, self._owner_paths = self._owner_paths, None
        try:
            lock.release()
        finally:
            if owner_paths is not None:
                owner_paths.discard(self._key)
            logger.debug("Lock %s liberado", self.lock_name)

    def __enter__(self) -> "InterprocessLockGuard":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "held" if self.is_held else "free"
        return f"InterprocessLockGuard(lock_name={self.lock_name!r}, path={str(self.lock_path)!r}, {state})"


@contextmanager
def acquire_lock(
    lock_name: str = DEFAULT_LOCK_NAME,
    *,
    lock_dir: Optional[Union[str, Path]] = None,
) -> Iterator[InterprocessLockGuard]:
    """Adquire `lock_name` pelo escopo do bloco `with`."""
    guard = InterprocessLockGuard(lock_name, lock_dir=lock_dir)
    guard.acquire()
    try:
        yield guard
    finally:
        guard.release()
