from __future__ import annotations

from typing import List, Tuple

from protoc_connect.config import GeneratorConfig
from protoc_connect.generator.comments import doc_comment, leading_comments, wrap_comments
from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.generator.signatures import client_signature, shape_of
from protoc_connect.models import STRINGS_TRIM_RIGHT, ServiceInfo, procedure_name
from protoc_connect.names import NameSet, unexport


def align(rows: List[Tuple[str, str]]) -> List[str]:
    """Pad the first column so the second one lines up, as gofmt does."""
    if not rows:
        return []
    width = max(len(left) for left, _ in rows)
    return [f"{left.ljust(width)} {right}" for left, right in rows]


def generate_client_interface(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    doc = doc_comment(
        g, names.client, " is a client for the ", service.full_name, " service.",
        width=config.comment_width,
        deprecated=service.deprecated,
    )
    methods = [
        {
            "comments": leading_comments(method.leading_comments, method.deprecated),
            "signature": client_signature(g, config, method),
        }
        for method in service.methods
    ]
    g.render("interface.go.j2", doc=doc, name=names.client, methods=methods)


def generate_client_constructor(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    width = config.comment_width
    doc = wrap_comments(
        g, names.client_constructor, " constructs a client for the ", service.full_name,
        " service. By default, it uses the binary protobuf Codec, ",
        "asks for gzipped responses, and sends uncompressed requests. ",
        "It doesn't have a default protocol; you must supply either the connect.WithGRPC() or ",
        "connect.WithGRPCWeb() options.",
        width=width,
    )
    doc.append("//")
    doc.extend(doc_comment(
        g, "The URL supplied here should be the base URL for the gRPC server ",
        "(e.g., https://api.acme.com or https://acme.com/grpc).",
        width=width,
        deprecated=service.deprecated,
    ))

    methods = []
    fields = []
    for method in service.methods:
        field = unexport(method.go_name)
        methods.append({
            "var": f"{field}Client",
            "input": g.qualified_go_ident(method.input),
            "output": g.qualified_go_ident(method.output),
            "procedure": procedure_name(service, method),
        })
        fields.append((f"{field}:", f"{field}Client"))

    g.render(
        "client_constructor.go.j2",
        doc=doc,
        names=names,
        doer=g.qualified_go_ident(config.connect("Doer")),
        client_option=g.qualified_go_ident(config.connect("ClientOption")),
        trim_right=g.qualified_go_ident(STRINGS_TRIM_RIGHT),
        new_client=g.qualified_go_ident(config.connect("NewClient")),
        methods=methods,
        fields=align(fields),
    )


def generate_client_implementation(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    width = config.comment_width
    doc = wrap_comments(g, names.client_impl, " implements ", names.client, ".", width=width)

    client_type = config.connect("Client")
    fields = []
    methods = []
    for method in service.methods:
        field = unexport(method.go_name)
        fields.append((
            field,
            f"*{g.qualified_go_ident(client_type)}"
            f"[{g.qualified_go_ident(method.input)}, {g.qualified_go_ident(method.output)}]",
        ))
        shape = shape_of(method)
        methods.append({
            "doc": doc_comment(
                g, method.go_name, " calls ", method.full_name, ".",
                width=width,
                deprecated=method.deprecated,
            ),
            "signature": client_signature(g, config, method, named=True),
            "field": field,
            "call": shape.client_call,
            "args": ", ".join(shape.client_call_args),
        })

    g.render(
        "client_impl.go.j2",
        doc=doc,
        names=names,
        fields=align(fields),
        methods=methods,
    )


def generate_client(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    generate_client_interface(g, config, service, names)
    generate_client_constructor(g, config, service, names)
    generate_client_implementation(g, config, service, names)
