from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, Optional, Sequence

from google.protobuf.compiler import plugin_pb2

from protoc_connect import __version__
from protoc_connect.config import parse_parameter
from protoc_connect.errors import ProtocConnectError
from protoc_connect.generator.connect_generator import generate
from protoc_connect.parser.descriptor_parser import DescriptorParser

logger = logging.getLogger(__name__)


def build_response(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    """Turn a CodeGeneratorRequest into a CodeGeneratorResponse.

    Problems with the request are reported in ``response.error``, as protoc expects.
    """
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    try:
        config = parse_parameter(request.parameter)
        parser = DescriptorParser(list(request.proto_file), config)
        files = parser.parse_files(request.file_to_generate)
        generated = generate(files, config, parser.package_names())
    except ProtocConnectError as e:
        logger.error("%s", e)
        response.error = str(e)
        return response

    for g in generated:
        out = response.file.add()
        out.name = g.filename
        out.content = g.content()
        logger.info("Generated %s", g.filename)
    return response


def run(stdin: BinaryIO, stdout: BinaryIO) -> plugin_pb2.CodeGeneratorResponse:
    """Read a serialized request from ``stdin`` and write the response to ``stdout``."""
    request = plugin_pb2.CodeGeneratorRequest()
    request.ParseFromString(stdin.read())
    logger.info(
        "Received request for %d file(s) with parameter %r",
        len(request.file_to_generate),
        request.parameter,
    )
    response = build_response(request)
    stdout.write(response.SerializeToString())
    stdout.flush()
    return response


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoc-gen-connect-go",
        description=(
            "protoc plugin that generates Connect Go clients and handlers. "
            "Run through protoc: protoc --connect-go_out=. --connect-go_opt=paths=source_relative foo.proto"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress to stderr; repeat for debug output",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = setup_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    # stdout carries the protobuf response
    logging.basicConfig(level=level, stream=sys.stderr, format="protoc-gen-connect-go: %(message)s")

    run(sys.stdin.buffer, sys.stdout.buffer)
    return 0
