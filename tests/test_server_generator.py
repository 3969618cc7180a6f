import re

import pytest

from protoc_connect.config import GeneratorConfig
from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.generator.server_generator import (
    generate_server,
    generate_server_constructor,
    generate_server_interface,
    generate_unimplemented_server,
)
from protoc_connect.names import new_names

from descriptor_builders import make_method, make_service


@pytest.fixture
def g():
    return GeneratedFile("pkg/elizer.connect.go", "example.com/pkg")


@pytest.fixture
def config():
    return GeneratorConfig()


def _ping_service(**kwargs):
    return make_service("Elizer", "pkg", [
        make_method("Ping"),
        make_method("Sum", client_streaming=True),
        make_method("CountUp", server_streaming=True),
        make_method("CumSum", client_streaming=True, server_streaming=True),
    ], **kwargs)


class TestServerInterface:
    def test_signatures_in_order(self, g, config):
        generate_server_interface(g, config, _ping_service(), new_names("Elizer"))
        assert (
            "// ElizerHandler is an implementation of the pkg.Elizer service.\n"
            "type ElizerHandler interface {\n"
            "\tPing(context.Context, *connect.Envelope[PingRequest]) (*connect.Envelope[PingResponse], error)\n"
            "\tSum(context.Context, *connect.ClientStream[SumRequest, SumResponse]) error\n"
            "\tCountUp(context.Context, *connect.Envelope[CountUpRequest], "
            "*connect.ServerStream[CountUpResponse]) error\n"
            "\tCumSum(context.Context, *connect.BidiStream[CumSumRequest, CumSumResponse]) error\n"
            "}\n"
        ) in g.content()

    def test_leading_comments(self, g, config):
        service = make_service(methods=[
            make_method("Ping", leading_comments=" Ping sends a ping.\n"),
        ])
        generate_server_interface(g, config, service, new_names("Elizer"))
        assert "\t// Ping sends a ping.\n\tPing(" in g.content()


class TestServerConstructor:
    def test_router(self, g, config):
        service = make_service(methods=[make_method("Ping")])
        generate_server_constructor(g, config, service, new_names("Elizer"))
        assert (
            "func NewElizerHandler(svc ElizerHandler, opts ...connect.HandlerOption) (string, http.Handler) {\n"
            "\tmux := http.NewServeMux()\n"
            '\tmux.Handle("/pkg.Elizer/Ping", connect.NewUnaryHandler(\n'
            '\t\t"/pkg.Elizer/Ping",\n'
            "\t\tsvc.Ping,\n"
            "\t\topts...,\n"
            "\t))\n"
            '\treturn "/pkg.Elizer/", mux\n'
            "}\n"
        ) in g.content()

    @pytest.mark.parametrize("name, factory", [
        ("Ping", "connect.NewUnaryHandler"),
        ("Sum", "connect.NewClientStreamHandler"),
        ("CountUp", "connect.NewServerStreamHandler"),
        ("CumSum", "connect.NewBidiStreamHandler"),
    ])
    def test_handler_factory_per_mode(self, g, config, name, factory):
        generate_server_constructor(g, config, _ping_service(), new_names("Elizer"))
        assert f'\tmux.Handle("/pkg.Elizer/{name}", {factory}(\n' in g.content()

    def test_mount_path(self, g, config):
        generate_server_constructor(g, config, _ping_service(), new_names("Elizer"))
        assert '\treturn "/pkg.Elizer/", mux\n' in g.content()

    def test_doc(self, g, config):
        generate_server_constructor(g, config, _ping_service(deprecated=True), new_names("Elizer"))
        content = g.content()
        assert content.startswith(
            "// NewElizerHandler builds an HTTP handler from the service implementation."
        )
        assert "//\n// Deprecated: do not use.\nfunc NewElizerHandler(" in content


class TestUnimplementedServer:
    def test_unary_returns_nil_message(self, g, config):
        service = make_service(methods=[make_method("Ping")])
        generate_unimplemented_server(g, config, service, new_names("Elizer"))
        assert (
            "// UnimplementedElizerHandler returns CodeUnimplemented from all methods.\n"
            "type UnimplementedElizerHandler struct{}\n"
            "\n"
            "func (UnimplementedElizerHandler) Ping(context.Context, *connect.Envelope[PingRequest]) "
            "(*connect.Envelope[PingResponse], error) {\n"
            '\treturn nil, connect.NewError(connect.CodeUnimplemented, errors.New("pkg.Elizer.Ping isn\'t implemented"))\n'
            "}\n"
        ) in g.content()

    def test_streaming_return_only_error(self, g, config):
        generate_unimplemented_server(g, config, _ping_service(), new_names("Elizer"))
        content = g.content()
        returns = re.findall(r"\treturn (.*)\n", content)
        assert len(returns) == 4
        assert returns[0].startswith("nil, connect.NewError(")
        for name, line in zip(["Sum", "CountUp", "CumSum"], returns[1:]):
            assert line == (
                f'connect.NewError(connect.CodeUnimplemented, errors.New("pkg.Elizer.{name} isn\'t implemented"))'
            )

    def test_empty_service_has_no_imports(self, g, config):
        generate_unimplemented_server(g, config, make_service(), new_names("Elizer"))
        assert "type UnimplementedElizerHandler struct{}" in g.content()
        assert g.imports == {}


class TestGenerateServer:
    def test_group_order(self, g, config):
        generate_server(g, config, _ping_service(), new_names("Elizer"))
        content = g.content()
        positions = [
            content.index("type ElizerHandler interface {"),
            content.index("func NewElizerHandler("),
            content.index("type UnimplementedElizerHandler struct{}"),
        ]
        assert positions == sorted(positions)

    def test_interface_counts_match_methods(self, g, config):
        service = _ping_service()
        generate_server(g, config, service, new_names("Elizer"))
        assert g.content().count("func (UnimplementedElizerHandler) ") == len(service.methods)
