"""SNL command layer.

Builds SNL command text, decodes store responses, derives per-user
namespaces, and defines the executor contract.
"""

from snl_timeline.snl.builder import (
    PATH_SEPARATOR,
    SNLCommand,
    build_command,
    build_path,
    validate_command_syntax,
)
from snl_timeline.snl.exceptions import NamespaceError, SNLCommandError
from snl_timeline.snl.executor import CommandExecutor
from snl_timeline.snl.namespace import NamespaceCodec, to_namespace, validate_namespace
from snl_timeline.snl.parser import (
    decode_response,
    parse_items,
    parse_keys,
    parse_record,
    parse_records,
)

__all__ = [
    "CommandExecutor",
    "NamespaceCodec",
    "NamespaceError",
    "PATH_SEPARATOR",
    "SNLCommand",
    "SNLCommandError",
    "build_command",
    "build_path",
    "decode_response",
    "parse_items",
    "parse_keys",
    "parse_record",
    "parse_records",
    "to_namespace",
    "validate_command_syntax",
    "validate_namespace",
]
