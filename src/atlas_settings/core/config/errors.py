# src/atlas_settings/core/config/errors.py
"""
Exceções canônicas da camada de configuração do store.

As exceções aqui definidas representam **violações estruturais explícitas**
na configuração do store, e não falhas de leitura do documento de
configurações (estas nunca viram exceção).

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - `ConfigError` herda de `SettingsError`, permitindo captura única

Limites explícitos:
    - Não realiza fallback ou recovery
"""

from atlas_settings.core.errors import SettingsError


class ConfigError(SettingsError):
    """
    Exceção base para erros de configuração do store.

    Todas as exceções levantadas durante carregamento, merge e validação
    estrutural da configuração devem herdar desta classe.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando um arquivo de defaults explicitamente informado
    não existe.

    Decisões arquiteturais:
        - Os defaults embutidos sempre existem
        - Um arquivo de defaults informado pelo chamador é obrigatório:
          path errado não deve degradar silenciosamente para o embutido
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Limites explícitos:
        - Não tenta inferir formato por conteúdo
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"settings_store": {"write": {"indent": 2}}}
        - override: {"settings_store": {"write": "compact"}}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito

    Limites explícitos:
        - Não realiza coerção ou conversão de tipos
    """


class UnknownConfigKeyError(ConfigError):
    """Chave desconhecida declarada sob `settings_store`."""


class InvalidConfigValueError(ConfigError):
    """Valor declarado com tipo ou faixa inválida (ex.: `indent` negativo)."""
