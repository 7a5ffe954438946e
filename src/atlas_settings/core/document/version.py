# src/atlas_settings/core/document/version.py
"""
Identidade de build usada como Version Stamp do documento.

O Version Stamp é uma string de quatro componentes
(`major.minor.build.revision`) gravada na raiz do documento a cada escrita.
Ele reflete a identidade de quem escreveu, não uma versão de schema
negociada com leitores.
"""

from __future__ import annotations

from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

from atlas_settings._version import __version__
from atlas_settings.core.errors import InvalidBuildIdentityError


@dataclass(frozen=True)
class BuildIdentity:
    """Identidade de build em quatro componentes inteiros não negativos."""

    major: int
    minor: int = 0
    build: int = 0
    revision: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "build", "revision"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidBuildIdentityError(f"Componente '{name}' inválido: {value!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}.{self.revision}"

    @classmethod
    def parse(cls, text: str) -> "BuildIdentity":
        """
        Converte `"1"`, `"1.2"`, `"1.2.3"` ou `"1.2.3.4"` em `BuildIdentity`.

        Aceita qualquer versão PEP 440 (`packaging`): apenas o segmento de
        release é usado, completado com zeros até quatro componentes. Segmentos
        pre, post, dev e local (ex.: `0.1.0rc1`, `1.0.post1`, `0.1.dev3+g1234abc`)
        são descartados.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidBuildIdentityError(f"Identidade de build inválida: {text!r}")

        try:
            release = Version(text).release
        except InvalidVersion as e:
            raise InvalidBuildIdentityError(f"Identidade de build inválida: {text!r}") from e

        if len(release) > 4:
            raise InvalidBuildIdentityError(f"Mais de quatro componentes: {text!r}")

        return cls(*(release + (0,) * (4 - len(release))))


def current_build_identity() -> BuildIdentity:
    """Identidade de build do pacote instalado."""
    return BuildIdentity.parse(__version__)
