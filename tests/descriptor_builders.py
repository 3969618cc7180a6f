"""Helpers that build descriptors and requests in memory, so tests don't need protoc."""

from typing import Iterable, Optional, Sequence, Tuple

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2

from protoc_connect.models import FileInfo, GoIdent, MethodInfo, ServiceInfo

PING_PROTO = "connect/ping/v1/ping.proto"
PING_PACKAGE = "connect.ping.v1"
PING_GO_PACKAGE = "example.com/gen/connect/ping/v1;pingv1"
PING_IMPORT_PATH = "example.com/gen/connect/ping/v1"

# (name, input, output, client_streaming, server_streaming)
RpcSpec = Tuple[str, str, str, bool, bool]

PING_RPCS: Sequence[RpcSpec] = [
    ("Ping", "PingRequest", "PingResponse", False, False),
    ("Sum", "SumRequest", "SumResponse", True, False),
    ("CountUp", "CountUpRequest", "CountUpResponse", False, True),
    ("CumSum", "CumSumRequest", "CumSumResponse", True, True),
]


def make_file(
    name: str,
    package: str,
    go_package: Optional[str] = None,
    messages: Iterable[str] = (),
    deprecated: bool = False,
) -> d2.FileDescriptorProto:
    fd = d2.FileDescriptorProto(name=name, package=package, syntax="proto3")
    if go_package is not None:
        fd.options.go_package = go_package
    if deprecated:
        fd.options.deprecated = True
    for message in messages:
        fd.message_type.add(name=message)
    return fd


def add_service(
    fd: d2.FileDescriptorProto,
    name: str,
    rpcs: Sequence[RpcSpec],
    deprecated: bool = False,
) -> d2.ServiceDescriptorProto:
    svc = fd.service.add(name=name)
    if deprecated:
        svc.options.deprecated = True
    for rpc_name, input_type, output_type, client_streaming, server_streaming in rpcs:
        if not input_type.startswith("."):
            input_type = f".{fd.package}.{input_type}"
        if not output_type.startswith("."):
            output_type = f".{fd.package}.{output_type}"
        svc.method.add(
            name=rpc_name,
            input_type=input_type,
            output_type=output_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
        )
    return svc


def add_comment(fd: d2.FileDescriptorProto, path: Sequence[int], text: str) -> None:
    location = fd.source_code_info.location.add()
    location.path.extend(path)
    location.leading_comments = text


def ping_file() -> d2.FileDescriptorProto:
    messages = []
    for _, input_type, output_type, _, _ in PING_RPCS:
        messages.extend([input_type, output_type])
    fd = make_file(PING_PROTO, PING_PACKAGE, PING_GO_PACKAGE, messages)
    add_service(fd, "PingService", PING_RPCS)
    return fd


def make_request(
    files: Sequence[d2.FileDescriptorProto],
    to_generate: Optional[Sequence[str]] = None,
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(files)
    if to_generate is None:
        to_generate = [files[-1].name]
    request.file_to_generate.extend(to_generate)
    return request


# --- Model-level builders ---

def make_method(
    name: str,
    service_full_name: str = "pkg.Elizer",
    client_streaming: bool = False,
    server_streaming: bool = False,
    import_path: str = "example.com/pkg",
    deprecated: bool = False,
    leading_comments: str = "",
) -> MethodInfo:
    return MethodInfo(
        name=name,
        go_name=name,
        full_name=f"{service_full_name}.{name}",
        input=GoIdent(import_path, f"{name}Request"),
        output=GoIdent(import_path, f"{name}Response"),
        client_streaming=client_streaming,
        server_streaming=server_streaming,
        deprecated=deprecated,
        leading_comments=leading_comments,
    )


def make_service(
    name: str = "Elizer",
    package: str = "pkg",
    methods: Sequence[MethodInfo] = (),
    deprecated: bool = False,
) -> ServiceInfo:
    return ServiceInfo(
        name=name,
        go_name=name,
        full_name=f"{package}.{name}" if package else name,
        package=package,
        deprecated=deprecated,
        methods=list(methods),
    )


def make_file_info(
    services: Sequence[ServiceInfo] = (),
    path: str = "pkg/elizer.proto",
    deprecated: bool = False,
) -> FileInfo:
    return FileInfo(
        path=path,
        go_package_name="pkg",
        go_import_path="example.com/pkg",
        generated_filename_prefix="pkg/elizer",
        deprecated=deprecated,
        services=list(services),
    )
