"""Map protoc's FileDescriptorProtos into the generator's model."""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Tuple

from google.protobuf import descriptor_pb2 as d2

from protoc_connect.config import PATHS_IMPORT, GeneratorConfig
from protoc_connect.errors import GenerationError
from protoc_connect.models import FileInfo, GoIdent, MethodInfo, ServiceInfo
from protoc_connect.names import clean_package_name, go_camel_case

logger = logging.getLogger(__name__)

# Field numbers used in SourceCodeInfo.Location paths.
_FILE_SERVICE_FIELD = 6
_SERVICE_METHOD_FIELD = 2


def _full_name(package: str, name: str) -> str:
    return f"{package}.{name}" if package else name


def _go_package(fd: d2.FileDescriptorProto, config: GeneratorConfig) -> Tuple[str, str]:
    """Return (import path, package name) for a file."""
    import_path = config.import_map.get(fd.name)
    package_name = config.package_map.get(fd.name, "")
    if import_path is None:
        go_package = fd.options.go_package
        if not go_package:
            raise GenerationError(
                f'unable to determine Go import path for "{fd.name}"; '
                f'set option go_package or pass M{fd.name}=<import path>'
            )
        import_path, _, package_name = go_package.partition(";")
    return import_path, clean_package_name(package_name or posixpath.basename(import_path))


def _walk_messages(
    package: str, prefix: str, messages: Iterable[d2.DescriptorProto]
) -> Iterable[Tuple[str, str]]:
    """Yield (fully-qualified name, name relative to the package) for every message."""
    for message in messages:
        relative = f"{prefix}.{message.name}" if prefix else message.name
        yield _full_name(package, relative), relative
        yield from _walk_messages(package, relative, message.nested_type)


def _leading_comments(fd: d2.FileDescriptorProto) -> Dict[Tuple[int, ...], str]:
    return {
        tuple(location.path): location.leading_comments
        for location in fd.source_code_info.location
        if location.leading_comments
    }


def _generated_filename_prefix(fd: d2.FileDescriptorProto, import_path: str, config: GeneratorConfig) -> str:
    prefix = fd.name[: -len(".proto")] if fd.name.endswith(".proto") else fd.name
    if config.paths == PATHS_IMPORT:
        return posixpath.join(import_path, posixpath.basename(prefix))
    return prefix


class DescriptorParser:
    """Resolves Go names across every file of one CodeGeneratorRequest."""

    def __init__(self, proto_files: List[d2.FileDescriptorProto], config: GeneratorConfig):
        self.config = config
        self._files = {fd.name: fd for fd in proto_files}
        # fully-qualified message name -> (file name, name relative to package)
        self._messages: Dict[str, Tuple[str, str]] = {}
        self._go_packages: Dict[str, Tuple[str, str]] = {}
        for fd in proto_files:
            for full, relative in _walk_messages(fd.package, "", fd.message_type):
                self._messages[full] = (fd.name, relative)

    def go_package(self, file_name: str) -> Tuple[str, str]:
        if file_name not in self._go_packages:
            self._go_packages[file_name] = _go_package(self._files[file_name], self.config)
        return self._go_packages[file_name]

    def package_names(self) -> Dict[str, str]:
        """Go import path -> package name, for every file whose Go package is known."""
        names: Dict[str, str] = {}
        for file_name, fd in self._files.items():
            if not fd.options.go_package and file_name not in self.config.import_map:
                continue
            import_path, package_name = self.go_package(file_name)
            names.setdefault(import_path, package_name)
        return names

    def message_ident(self, type_name: str) -> GoIdent:
        full = type_name.lstrip(".")
        if full not in self._messages:
            raise GenerationError(f'unknown message type "{full}"')
        file_name, relative = self._messages[full]
        import_path, _ = self.go_package(file_name)
        return GoIdent(import_path, go_camel_case(relative))

    def parse_file(self, file_name: str) -> FileInfo:
        if file_name not in self._files:
            raise GenerationError(f'no descriptor for requested file "{file_name}"')
        fd = self._files[file_name]
        import_path, package_name = self.go_package(file_name)
        comments = _leading_comments(fd)

        services: List[ServiceInfo] = []
        for i, svc in enumerate(fd.service):
            service_full_name = _full_name(fd.package, svc.name)
            service = ServiceInfo(
                name=svc.name,
                go_name=go_camel_case(svc.name),
                full_name=service_full_name,
                package=fd.package,
                deprecated=svc.options.deprecated,
            )
            for j, method in enumerate(svc.method):
                service.methods.append(MethodInfo(
                    name=method.name,
                    go_name=go_camel_case(method.name),
                    full_name=f"{service_full_name}.{method.name}",
                    input=self.message_ident(method.input_type),
                    output=self.message_ident(method.output_type),
                    client_streaming=method.client_streaming,
                    server_streaming=method.server_streaming,
                    deprecated=method.options.deprecated,
                    leading_comments=comments.get(
                        (_FILE_SERVICE_FIELD, i, _SERVICE_METHOD_FIELD, j), ""
                    ),
                ))
            services.append(service)

        logger.debug("Parsed %s: %d service(s)", file_name, len(services))
        return FileInfo(
            path=fd.name,
            go_package_name=package_name,
            go_import_path=import_path,
            generated_filename_prefix=_generated_filename_prefix(fd, import_path, self.config),
            deprecated=fd.options.deprecated,
            services=services,
        )

    def parse_files(self, files_to_generate: Iterable[str]) -> List[FileInfo]:
        """FileInfo for every file protoc asked us to generate, in request order."""
        return [self.parse_file(name) for name in files_to_generate]
