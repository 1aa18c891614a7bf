"""Editor features - completion, go-to-definition, signature help.

Results are plain dataclasses; converting them to a particular editor
protocol is left to the caller.
"""

from qxlens.features.completion import CompletionItem, CompletionKind, complete
from qxlens.features.definition import DefinitionLocation, find_definition
from qxlens.features.signature import (
    ParameterInfo,
    SignatureHelp,
    SignatureInfo,
    signature_help,
)

__all__ = [
    "CompletionItem",
    "CompletionKind",
    "DefinitionLocation",
    "ParameterInfo",
    "SignatureHelp",
    "SignatureInfo",
    "complete",
    "find_definition",
    "signature_help",
]
