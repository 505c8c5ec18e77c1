"""
SIC Assembler - Configuration
=============================

Assembler settings: object-record limits, symbol policies and the
conventions of the source format. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line flags (applied by the CLI on top of the environment)
"""

from dataclasses import dataclass, replace
import codecs
import os


# Object records carry at most 30 bytes (60 hex characters) of payload.
DEFAULT_MAX_TEXT_BYTES = 30

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class AssemblerConfig:
    """
    Configuration for a translation run.

    Attributes:
        max_text_bytes: Payload limit of a single text record (default: 30)
        strict_symbols: Treat undefined and duplicate labels as fatal errors
            instead of resolving to 0 / keeping the first definition
        no_label_token: Label-field token meaning "no label" (default: "-")
        comment_prefix: Lines starting with this are comments (default: ".")
        encoding: Text encoding for input files and C'...' literals
    """

    max_text_bytes: int = DEFAULT_MAX_TEXT_BYTES
    strict_symbols: bool = False
    no_label_token: str = "-"
    comment_prefix: str = "."
    encoding: str = "latin-1"

    def __post_init__(self) -> None:
        if self.max_text_bytes < 3:
            # A single instruction must always fit in one record
            raise ValueError(f"max_text_bytes must be at least 3, got {self.max_text_bytes}")

    def with_overrides(self, **changes) -> "AssemblerConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create an AssemblerConfig from environment variables.

        Environment variables (all optional):
            SICASM_MAX_TEXT_BYTES: Text record payload limit (integer >= 3)
            SICASM_STRICT: Strict symbol checking (1/0, true/false, yes/no)
            SICASM_ENCODING: Input text encoding

        Invalid values are ignored and the default is kept.
        """
        changes = {}

        if max_bytes := os.environ.get("SICASM_MAX_TEXT_BYTES"):
            try:
                value = int(max_bytes)
                if value >= 3:
                    changes["max_text_bytes"] = value
            except ValueError:
                pass

        if strict := os.environ.get("SICASM_STRICT"):
            if strict.lower() in _TRUE_VALUES:
                changes["strict_symbols"] = True
            elif strict.lower() in _FALSE_VALUES:
                changes["strict_symbols"] = False

        if encoding := os.environ.get("SICASM_ENCODING"):
            try:
                codecs.lookup(encoding)
                changes["encoding"] = encoding
            except LookupError:
                pass

        return cls(**changes)
