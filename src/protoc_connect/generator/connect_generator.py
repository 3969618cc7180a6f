"""Walks files, services and methods in descriptor order and assembles one
``.connect.go`` file per proto file that declares at least one service."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from protoc_connect.config import GeneratorConfig
from protoc_connect.generator.client_generator import generate_client
from protoc_connect.generator.comments import wrap_comments
from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.generator.server_generator import generate_server
from protoc_connect.models import FileInfo, ServiceInfo
from protoc_connect.names import new_names

logger = logging.getLogger(__name__)

BANNER = "// Code generated by protoc-gen-connect-go. DO NOT EDIT."


def generate_preamble(g: GeneratedFile, config: GeneratorConfig, file: FileInfo) -> None:
    g.p(BANNER)
    g.p("//")
    if file.deprecated:
        g.extend(wrap_comments(g, file.path, " is a deprecated file.", width=config.comment_width))
    else:
        g.p("// Source: ", file.path)
    g.p()
    g.package_clause(file.go_package_name)


def generate_handshake(g: GeneratedFile, config: GeneratorConfig) -> None:
    g.extend(wrap_comments(
        g, "This is a compile-time assertion to ensure that this generated file ",
        "and the connect package are compatible. If you get a compiler error that this constant ",
        "isn't defined, this code was generated with a version of connect newer than the one ",
        "compiled into your binary. You can fix the problem by either regenerating this code ",
        "with an older version of connect or updating the connect version compiled into your binary.",
        width=config.comment_width,
    ))
    g.p("const _ = ", config.connect(config.version_assertion))
    g.p()


def generate_service(g: GeneratedFile, config: GeneratorConfig, service: ServiceInfo) -> None:
    names = new_names(service.go_name)
    generate_client(g, config, service, names)
    generate_server(g, config, service, names)


def generate_file(
    file: FileInfo,
    config: GeneratorConfig,
    package_names: Optional[Dict[str, str]] = None,
) -> Optional[GeneratedFile]:
    """Generate the Go bindings for one proto file.

    Returns None when the file declares no services.
    """
    if not file.services:
        logger.debug("Skipping %s: no services", file.path)
        return None

    g = GeneratedFile(
        file.generated_filename_prefix + config.filename_suffix,
        file.go_import_path,
        package_names,
    )
    generate_preamble(g, config, file)
    generate_handshake(g, config)
    for service in file.services:
        generate_service(g, config, service)
    logger.debug(
        "Generated %s from %s (%d service(s))", g.filename, file.path, len(file.services)
    )
    return g


def generate(
    files: List[FileInfo],
    config: GeneratorConfig,
    package_names: Optional[Dict[str, str]] = None,
) -> List[GeneratedFile]:
    """Generate every requested file, in request order."""
    if package_names is None:
        package_names = {f.go_import_path: f.go_package_name for f in files}
    generated: List[GeneratedFile] = []
    for file in files:
        g = generate_file(file, config, package_names)
        if g is not None:
            generated.append(g)
    return generated
