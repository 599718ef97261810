"""Command engine for RESP-KV."""

from .executor import CommandExecutor

__all__ = ["CommandExecutor"]
