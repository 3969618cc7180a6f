from __future__ import annotations


class ProtocConnectError(Exception):
    """Base class for errors reported back to protoc."""


class ConfigError(ProtocConnectError):
    """Raised when the plugin parameter string cannot be parsed."""


class GenerationError(ProtocConnectError):
    """Raised when a descriptor cannot be turned into Go bindings."""
