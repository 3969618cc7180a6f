"""Go call signatures for the four RPC streaming modes.

Every place that depends on the streaming mode (client and server
signatures, the client call form, the handler factory and the
unimplemented stub) reads it from :data:`STREAMING_SHAPES`, so a change to
one mode's shape only has to be made once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from protoc_connect.config import GeneratorConfig
from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.models import CONTEXT, ERROR, GoIdent, MethodInfo, StreamingMode

CTX = "ctx"
REQ = "req"
STREAM = "stream"


@dataclass(frozen=True)
class Param:
    name: str
    type: str

    def render(self, named: bool) -> str:
        return f"{self.name} {self.type}" if named else self.type


# (g, config, method) -> (params, results)
SignatureBuilder = Callable[
    [GeneratedFile, GeneratorConfig, MethodInfo], Tuple[List[Param], List[str]]
]


@dataclass(frozen=True)
class StreamingShape:
    client: SignatureBuilder
    server: SignatureBuilder
    # method on connect.Client and the arguments passed through to it
    client_call: str
    client_call_args: Tuple[str, ...]
    handler_factory: str
    # the unimplemented stub has to return a nil message before the error
    returns_message: bool


def _generic(g: GeneratedFile, ident: GoIdent, *args: GoIdent) -> str:
    type_args = ", ".join(g.qualified_go_ident(arg) for arg in args)
    return f"*{g.qualified_go_ident(ident)}[{type_args}]"


def _unary(g, config, method):
    # client and server sides are symmetric for unary calls
    params = [
        Param(CTX, g.qualified_go_ident(CONTEXT)),
        Param(REQ, _generic(g, config.connect("Envelope"), method.input)),
    ]
    results = [
        _generic(g, config.connect("Envelope"), method.output),
        g.qualified_go_ident(ERROR),
    ]
    return params, results


def _client_stream_client(g, config, method):
    params = [Param(CTX, g.qualified_go_ident(CONTEXT))]
    results = [_generic(g, config.connect("ClientStreamForClient"), method.input, method.output)]
    return params, results


def _client_stream_server(g, config, method):
    params = [
        Param(CTX, g.qualified_go_ident(CONTEXT)),
        Param(STREAM, _generic(g, config.connect("ClientStream"), method.input, method.output)),
    ]
    return params, [g.qualified_go_ident(ERROR)]


def _server_stream_client(g, config, method):
    params = [
        Param(CTX, g.qualified_go_ident(CONTEXT)),
        Param(REQ, _generic(g, config.connect("Envelope"), method.input)),
    ]
    results = [
        _generic(g, config.connect("ServerStreamForClient"), method.output),
        g.qualified_go_ident(ERROR),
    ]
    return params, results


def _server_stream_server(g, config, method):
    params = [
        Param(CTX, g.qualified_go_ident(CONTEXT)),
        Param(REQ, _generic(g, config.connect("Envelope"), method.input)),
        Param(STREAM, _generic(g, config.connect("ServerStream"), method.output)),
    ]
    return params, [g.qualified_go_ident(ERROR)]


def _bidi_stream_client(g, config, method):
    params = [Param(CTX, g.qualified_go_ident(CONTEXT))]
    results = [_generic(g, config.connect("BidiStreamForClient"), method.input, method.output)]
    return params, results


def _bidi_stream_server(g, config, method):
    params = [
        Param(CTX, g.qualified_go_ident(CONTEXT)),
        Param(STREAM, _generic(g, config.connect("BidiStream"), method.input, method.output)),
    ]
    return params, [g.qualified_go_ident(ERROR)]


STREAMING_SHAPES: Dict[StreamingMode, StreamingShape] = {
    StreamingMode.UNARY: StreamingShape(
        client=_unary,
        server=_unary,
        client_call="CallUnary",
        client_call_args=(CTX, REQ),
        handler_factory="NewUnaryHandler",
        returns_message=True,
    ),
    StreamingMode.CLIENT_STREAM: StreamingShape(
        client=_client_stream_client,
        server=_client_stream_server,
        client_call="CallClientStream",
        client_call_args=(CTX,),
        handler_factory="NewClientStreamHandler",
        returns_message=False,
    ),
    StreamingMode.SERVER_STREAM: StreamingShape(
        client=_server_stream_client,
        server=_server_stream_server,
        client_call="CallServerStream",
        client_call_args=(CTX, REQ),
        handler_factory="NewServerStreamHandler",
        returns_message=False,
    ),
    StreamingMode.BIDI_STREAM: StreamingShape(
        client=_bidi_stream_client,
        server=_bidi_stream_server,
        client_call="CallBidiStream",
        client_call_args=(CTX,),
        handler_factory="NewBidiStreamHandler",
        returns_message=False,
    ),
}


def shape_of(method: MethodInfo) -> StreamingShape:
    return STREAMING_SHAPES[method.streaming_mode]


def render_signature(name: str, params: List[Param], results: List[str], named: bool) -> str:
    rendered = ", ".join(param.render(named) for param in params)
    if len(results) == 1:
        return f"{name}({rendered}) {results[0]}"
    return f"{name}({rendered}) ({', '.join(results)})"


def client_signature(
    g: GeneratedFile, config: GeneratorConfig, method: MethodInfo, named: bool = False
) -> str:
    params, results = shape_of(method).client(g, config, method)
    return render_signature(method.go_name, params, results, named)


def server_signature(
    g: GeneratedFile, config: GeneratorConfig, method: MethodInfo, named: bool = False
) -> str:
    params, results = shape_of(method).server(g, config, method)
    return render_signature(method.go_name, params, results, named)
