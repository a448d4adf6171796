"""
sclstream Config - Streaming Configuration System

Property-based configuration for loaders and statistics passes. Values can be
set globally or overridden per thread inside a ``config.local(...)`` block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any
import logging
import os
import threading
import warnings

logger = logging.getLogger("sclstream.config")


# =============================================================================
# Environment
# =============================================================================

_DEFAULT_CHUNK_SIZE = 1024


def _env_chunk_size() -> int:
    """Read the default chunk size from SCLSTREAM_CHUNK_SIZE."""
    raw = os.environ.get("SCLSTREAM_CHUNK_SIZE", "").strip()
    if not raw:
        return _DEFAULT_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        warnings.warn(
            f"Ignoring invalid SCLSTREAM_CHUNK_SIZE={raw!r}, "
            f"using {_DEFAULT_CHUNK_SIZE}"
        )
        return _DEFAULT_CHUNK_SIZE
    return value


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class LoaderConfig:
    """Configuration for chunked loaders."""
    chunk_size: int = field(default_factory=_env_chunk_size)  # Entries per chunk buffer


@dataclass
class ComputeConfig:
    """Configuration for statistics passes."""
    ddof: int = 1                  # Delta degrees of freedom for variance


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SclStreamConfig:
    """
    Global configuration manager.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        sclstream.config.loader.chunk_size = 4096

        # Local configuration (context manager)
        with sclstream.config.local(compute=ComputeConfig(ddof=0)):
            result = compute_matrix_stats(loader, col_stats=Stats.VARIANCE)
        # Back to global config
    """

    _SECTIONS = ("loader", "compute")

    def __init__(self):
        self._global_loader = LoaderConfig()
        self._global_compute = ComputeConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Section Properties
    # -------------------------------------------------------------------------

    @property
    def loader(self) -> LoaderConfig:
        """Get loader configuration."""
        if getattr(self._local, "loader", None) is not None:
            return self._local.loader
        return self._global_loader

    @loader.setter
    def loader(self, value: LoaderConfig):
        """Set global loader configuration."""
        self._global_loader = value

    @property
    def compute(self) -> ComputeConfig:
        """Get compute configuration."""
        if getattr(self._local, "compute", None) is not None:
            return self._local.compute
        return self._global_compute

    @compute.setter
    def compute(self, value: ComputeConfig):
        """Set global compute configuration."""
        self._global_compute = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def chunk_size(self) -> int:
        """Entries per chunk buffer for new loaders."""
        return self.loader.chunk_size

    @chunk_size.setter
    def chunk_size(self, value: int):
        self._global_loader.chunk_size = value

    @property
    def ddof(self) -> int:
        """Delta degrees of freedom for variance."""
        return self.compute.ddof

    @ddof.setter
    def ddof(self, value: int):
        self._global_compute.ddof = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (loader, compute)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise TypeError(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        """Set thread-local configuration; return the overrides it replaced."""
        previous = {}
        for key, value in kwargs.items():
            if value is not None:
                previous[key] = getattr(self._local, key, None)
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Put back thread-local configuration saved by _set_local."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_loader = LoaderConfig()
        self._global_compute = ComputeConfig()
        logger.debug("Configuration reset to defaults")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "loader": {
                "chunk_size": self.loader.chunk_size,
            },
            "compute": {
                "ddof": self.compute.ddof,
            },
        }

    def __repr__(self) -> str:
        return f"SclStreamConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SclStreamConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Dict[str, Any] = {}

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = SclStreamConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> SclStreamConfig:
    """Get the global configuration instance."""
    return config


def set_chunk_size(chunk_size: int = _DEFAULT_CHUNK_SIZE):
    """Set the global chunk buffer size for loaders created afterwards."""
    config.loader = LoaderConfig(chunk_size=chunk_size)


def set_ddof(ddof: int = 1):
    """Set the global delta degrees of freedom used for variance."""
    config.compute = ComputeConfig(ddof=ddof)


__all__ = [
    "LoaderConfig",
    "ComputeConfig",
    "SclStreamConfig",
    "config",
    "get_config",
    "set_chunk_size",
    "set_ddof",
]
