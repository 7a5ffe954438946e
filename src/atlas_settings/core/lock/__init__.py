# src/atlas_settings/core/lock/__init__.py
"""Exclusão mútua interprocesso para ciclos read-modify-write do documento."""

from .guard import DEFAULT_LOCK_NAME, InterprocessLockGuard, acquire_lock, lock_file_path

__all__ = ["DEFAULT_LOCK_NAME", "InterprocessLockGuard", "acquire_lock", "lock_file_path"]
