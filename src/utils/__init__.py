"""Utility modules for common functionality."""

from .config_loader import AppConfig, ConfigLoader
from .corpus_loader import ExampleCorpusLoader
from .data_loader import LabeledQueryLoader
from .logger import get_logger

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "ExampleCorpusLoader",
    "LabeledQueryLoader",
    "get_logger",
]
