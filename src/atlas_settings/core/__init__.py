# src/atlas_settings/core/__init__.py
"""
Core do Atlas Settings.

Componentes principais:
    - lock     → exclusão mútua interprocesso por nome
    - document → modelo, Version Stamp e (de)serialização do documento
    - config   → resolução da configuração do store
    - errors   → hierarquia canônica de exceções

O core não mantém estado global além do registro, por thread, dos locks
adquiridos (usado para detectar reentrada).
"""
