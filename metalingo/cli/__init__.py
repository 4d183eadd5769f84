# metalingo/cli/__init__.py
"""Metalingo 命令行工具。"""

from .main import app, main

__all__ = ["app", "main"]
