from __future__ import annotations

from protoc_connect.config import GeneratorConfig
from protoc_connect.generator.comments import doc_comment, leading_comments, wrap_comments
from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.generator.signatures import server_signature, shape_of
from protoc_connect.models import (
    ERRORS_NEW,
    HTTP_HANDLER,
    HTTP_NEW_SERVE_MUX,
    ServiceInfo,
    mount_path,
    procedure_name,
)
from protoc_connect.names import NameSet


def generate_server_interface(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    doc = doc_comment(
        g, names.server, " is an implementation of the ", service.full_name, " service.",
        width=config.comment_width,
        deprecated=service.deprecated,
    )
    methods = [
        {
            "comments": leading_comments(method.leading_comments, method.deprecated),
            "signature": server_signature(g, config, method),
        }
        for method in service.methods
    ]
    g.render("interface.go.j2", doc=doc, name=names.server, methods=methods)


def generate_server_constructor(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    width = config.comment_width
    doc = wrap_comments(
        g, names.server_constructor, " builds an HTTP handler from the service implementation.",
        " It returns the path on which to mount the handler and the handler itself.",
        width=width,
    )
    doc.append("//")
    doc.extend(doc_comment(
        g, "By default, handlers support the gRPC and gRPC-Web protocols with ",
        "the binary protobuf and JSON codecs.",
        width=width,
        deprecated=service.deprecated,
    ))

    methods = [
        {
            "procedure": procedure_name(service, method),
            "factory": g.qualified_go_ident(config.connect(shape_of(method).handler_factory)),
            "go_name": method.go_name,
        }
        for method in service.methods
    ]
    g.render(
        "server_constructor.go.j2",
        doc=doc,
        names=names,
        handler_option=g.qualified_go_ident(config.connect("HandlerOption")),
        http_handler=g.qualified_go_ident(HTTP_HANDLER),
        new_serve_mux=g.qualified_go_ident(HTTP_NEW_SERVE_MUX),
        methods=methods,
        mount_path=mount_path(service),
    )


def generate_unimplemented_server(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    doc = wrap_comments(
        g, names.unimplemented_server, " returns CodeUnimplemented from all methods.",
        width=config.comment_width,
    )
    methods = [
        {
            "signature": server_signature(g, config, method),
            "returns_message": shape_of(method).returns_message,
            "full_name": method.full_name,
        }
        for method in service.methods
    ]
    new_error = errors_new = code_unimplemented = ""
    if methods:
        new_error = g.qualified_go_ident(config.connect("NewError"))
        code_unimplemented = g.qualified_go_ident(config.connect("CodeUnimplemented"))
        errors_new = g.qualified_go_ident(ERRORS_NEW)
    g.render(
        "unimplemented.go.j2",
        doc=doc,
        names=names,
        methods=methods,
        new_error=new_error,
        code_unimplemented=code_unimplemented,
        errors_new=errors_new,
    )


def generate_server(
    g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo, names: NameSet
) -> None:
    generate_server_interface(g, config, service, names)
    generate_server_constructor(g, config, service, names)
    generate_unimplemented_server(g, config, service, names)
