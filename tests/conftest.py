# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Settings.

Este módulo define fixtures reutilizáveis que fornecem:
- paths isolados para o documento de configurações e para o lock
- stores configurados com nome de lock exclusivo por teste
- arquivos de configuração do store (defaults + override local)
- execução de código Python em subprocessos (cenários interprocesso)

Decisões arquiteturais:
    - Cada teste usa seu próprio `tmp_path` para documento e lock,
      evitando contenção com outros testes ou com instalações reais
    - Subprocessos recebem `src/` no PYTHONPATH, funcionando tanto com
      o pacote instalado quanto a partir do checkout

Invariantes:
    - Nenhuma fixture toca o diretório temporário global do sistema
    - Nenhuma fixture mantém estado entre testes
"""

import os
import subprocess
import sys
import textwrap
import uuid
from pathlib import Path

import pytest


_SRC_DIR = Path(__file__).resolve().parents[1] / "src"


# =====================================================
# Documento e lock
# =====================================================

@pytest.fixture
def lock_dir(tmp_path: Path) -> Path:
    """Diretório de locks exclusivo do teste."""
    d = tmp_path / "locks"
    d.mkdir()
    return d


@pytest.fixture
def lock_name() -> str:
    """Nome de lock único por teste."""
    return f"atlas-settings-test-{uuid.uuid4()}"


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """Path (ainda inexistente) do documento de configurações."""
    return tmp_path / "config" / "settings.yaml"


@pytest.fixture
def store(lock_dir: Path, lock_name: str):
    """SettingsStore com identidade de build fixa e lock isolado."""
    from atlas_settings.persistence.settings_store import SettingsStore

    return SettingsStore(lock_name=lock_name, lock_dir=lock_dir, build_identity="1.2.3.4")


@pytest.fixture
def store_factory(lock_dir: Path, lock_name: str):
    """
    Fábrica de stores que compartilham o mesmo lock.

    Simula instâncias independentes da aplicação: cada chamada retorna um
    objeto novo, sem estado compartilhado além do lock nomeado.
    """
    from atlas_settings.persistence.settings_store import SettingsStore

    def _make(**kwargs):
        kwargs.setdefault("build_identity", "1.2.3.4")
        return SettingsStore(lock_name=lock_name, lock_dir=lock_dir, **kwargs)

    return _make


# =====================================================
# Configuração do store
# =====================================================

@pytest.fixture
def store_defaults_yaml() -> str:
    """
    YAML de defaults do store, semelhante ao arquivo versionado de um projeto.

    Define tag raiz, lock e opções de escrita explicitamente, servindo de
    base para overrides locais.
    """
    return textwrap.dedent(
        """
        settings_store:
          root_tag: DemoApp
          build_identity: "2.0"
          lock:
            name: demo-app-settings
            directory: null
          write:
            indent: 4
            backup_corrupt: true
        """
    ).lstrip()


@pytest.fixture
def store_local_yaml() -> str:
    """YAML de override local: altera apenas diretório do lock e backup."""
    return textwrap.dedent(
        """
        settings_store:
          lock:
            directory: /var/tmp/demo-locks
          write:
            backup_corrupt: false
        """
    ).lstrip()


# =====================================================
# Subprocessos
# =====================================================

@pytest.fixture
def python_env() -> dict:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = str(_SRC_DIR) + (os.pathsep + existing if existing else "")
    return env


@pytest.fixture
def spawn_python(python_env):
    """
    Inicia `code` em um interpretador Python separado.

    Retorna o `subprocess.Popen` com stdout em modo texto; o chamador é
    responsável por aguardar o término.
    """
    procs = []

    def _spawn(code: str, *args: str) -> subprocess.Popen:
        proc = subprocess.Popen(
            [sys.executable, "-c", textwrap.dedent(code), *args],
            env=python_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        procs.append(proc)
        return proc

    yield _spawn

    for proc in procs:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
