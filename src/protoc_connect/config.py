from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from protoc_connect.errors import ConfigError
from protoc_connect.models import GoIdent

PATHS_IMPORT = "import"
PATHS_SOURCE_RELATIVE = "source_relative"


@dataclass
class GeneratorConfig:
    """Knobs the orchestrator hands down to every emitter."""

    # 100 columns minus room for "// "
    comment_width: int = 97
    connect_import_path: str = "github.com/bufbuild/connect"
    version_assertion: str = "IsAtLeastVersion0_0_1"
    filename_suffix: str = ".connect.go"
    paths: str = PATHS_IMPORT
    # proto file path -> Go import path, from "M" parameters
    import_map: Dict[str, str] = field(default_factory=dict)
    # proto file path -> Go package name, from "M<file>=<path>;<name>"
    package_map: Dict[str, str] = field(default_factory=dict)

    def connect(self, name: str) -> GoIdent:
        """An identifier exported by the connect runtime package."""
        return GoIdent(self.connect_import_path, name)


def parse_parameter(parameter: str) -> GeneratorConfig:
    """Parse the comma-separated parameter string protoc passes to the plugin.

    Recognised keys are ``paths`` (``import`` or ``source_relative``) and
    ``M<proto path>=<go import path>[;<package name>]`` entries.
    """
    config = GeneratorConfig()
    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue
        key, _, value = item.partition("=")
        if key.startswith("M") and len(key) > 1:
            import_path, _, package_name = value.partition(";")
            config.import_map[key[1:]] = import_path
            if package_name:
                config.package_map[key[1:]] = package_name
        elif key == "paths":
            if value not in (PATHS_IMPORT, PATHS_SOURCE_RELATIVE):
                raise ConfigError(f'invalid value for "paths": "{value}"')
            config.paths = value
        else:
            raise ConfigError(f'unknown parameter "{key}"')
    return config
