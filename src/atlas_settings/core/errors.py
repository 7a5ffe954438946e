# src/atlas_settings/core/errors.py
"""
Exceções canônicas do Atlas Settings.

Este módulo define a hierarquia oficial de exceções levantadas pelo store
de configurações e pelo Lock Guard interprocesso.

Política de propagação:
    - Falhas de leitura (arquivo ausente, ilegível ou malformado) NUNCA
      viram exceção: são absorvidas e expostas como `LoadStatus`
    - Falhas de escrita são sempre propagadas (`SettingsWriteError`)
    - Erros de uso (formato não suportado, lock liberado duas vezes,
      reentrada no lock) são levantados imediatamente

Invariantes:
    - Todas as exceções do projeto herdam de `SettingsError`
    - `SettingsWriteError` sempre encadeia o `OSError` original

Limites explícitos:
    - Não representa erros de conteúdo de seções (o store não valida schema)
    - Não implementa retry
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class SettingsError(Exception):
    """Exceção base do Atlas Settings."""


class UnsupportedSettingsFormatError(SettingsError):
    """
    Extensão do arquivo de configurações não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Este erro representa configuração incorreta do chamador e não uma
    falha de leitura; por isso não é absorvido pelo `load`.
    """


class InvalidBuildIdentityError(SettingsError):
    """Identidade de build não pode ser convertida em `major.minor.build.revision`."""


class InvalidSectionNameError(SettingsError):
    """Nome de seção vazio ou de tipo inválido."""


class SettingsWriteError(SettingsError):
    """
    Falha fatal ao persistir o documento de configurações.

    Cobre permissão negada, disco cheio, path inválido e falha ao criar o
    diretório pai. A exceção original fica disponível em `__cause__`.
    """

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"Falha ao gravar configurações em: {self.path}")


class LockError(SettingsError):
    """Base para erros de uso do Lock Guard."""


class LockNotHeldError(LockError):
    """Tentativa de liberar um lock que não está adquirido por este guard."""


class LockReentryError(LockError):
    """
    A mesma thread tentou adquirir novamente um lock que já possui.

    Sem esta verificação a segunda aquisição bloquearia para sempre
    (o lock de arquivo não é reentrante entre descritores distintos).
    """


class InvalidLockNameError(LockError):
    """Nome de lock vazio ou de tipo inválido."""


class MalformedSettingsDocumentError(SettingsError):
    """
    Conteúdo do documento não corresponde ao formato esperado.

    Uso interno do codec: `load` e `update` convertem esta exceção em
    `LoadStatus.CORRUPT` e nunca a propagam ao chamador.
    """
