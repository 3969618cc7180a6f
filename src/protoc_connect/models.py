from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Union


@dataclass(frozen=True)
class GoIdent:
    """A Go identifier qualified by the import path of its package.

    An empty import path marks a predeclared identifier such as ``error``.
    """

    import_path: str
    name: str


ERROR = GoIdent("", "error")
CONTEXT = GoIdent("context", "Context")
ERRORS_NEW = GoIdent("errors", "New")
HTTP_HANDLER = GoIdent("net/http", "Handler")
HTTP_NEW_SERVE_MUX = GoIdent("net/http", "NewServeMux")
STRINGS_TRIM_RIGHT = GoIdent("strings", "TrimRight")

# A piece of documentation text: either literal text or a reference to a Go
# identifier that has to be qualified in the file it is written to.
CommentFragment = Union[str, GoIdent]


class StreamingMode(Enum):
    UNARY = auto()
    CLIENT_STREAM = auto()
    SERVER_STREAM = auto()
    BIDI_STREAM = auto()

    @classmethod
    def of(cls, client_streaming: bool, server_streaming: bool) -> StreamingMode:
        if client_streaming and server_streaming:
            return cls.BIDI_STREAM
        if client_streaming:
            return cls.CLIENT_STREAM
        if server_streaming:
            return cls.SERVER_STREAM
        return cls.UNARY


@dataclass
class MethodInfo:
    name: str
    go_name: str
    full_name: str
    input: GoIdent
    output: GoIdent
    client_streaming: bool = False
    server_streaming: bool = False
    deprecated: bool = False
    leading_comments: str = ""

    @property
    def streaming_mode(self) -> StreamingMode:
        return StreamingMode.of(self.client_streaming, self.server_streaming)


@dataclass
class ServiceInfo:
    name: str
    go_name: str
    full_name: str
    package: str = ""
    deprecated: bool = False
    methods: List[MethodInfo] = field(default_factory=list)


@dataclass
class FileInfo:
    path: str
    go_package_name: str
    go_import_path: str
    generated_filename_prefix: str
    deprecated: bool = False
    services: List[ServiceInfo] = field(default_factory=list)


def reflection_name(service: ServiceInfo) -> str:
    """Fully-qualified service name as used on the wire."""
    if service.package:
        return f"{service.package}.{service.name}"
    return service.name


def procedure_name(service: ServiceInfo, method: MethodInfo) -> str:
    return f"/{reflection_name(service)}/{method.name}"


def mount_path(service: ServiceInfo) -> str:
    return f"/{reflection_name(service)}/"
