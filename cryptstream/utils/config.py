# config.py
# -*- coding: utf-8 -*-
"""Immutable run configuration, built once from the command line."""

from dataclasses import dataclass

# Operation modes accepted by the traversal collaborator
MODE_AUTO = "auto"
MODE_ENCRYPT = "encrypt"
MODE_DECRYPT = "decrypt"
MODES = (MODE_AUTO, MODE_ENCRYPT, MODE_DECRYPT)

@dataclass(frozen=True)
class RunConfig:
    """
    Options for one invocation.

    Attributes:
        path: File or directory to process.
        mode: One of MODES. 'auto' chooses per file from the name suffix.
        recursive: Descend into subdirectories when ``path`` is a directory.
        delete_source: Remove each source file after a successful transform.
        assume_yes: Skip the confirmation prompt before a directory run.
    """
    path: str
    mode: str = MODE_AUTO
    recursive: bool = False
    delete_source: bool = True
    assume_yes: bool = False

    @classmethod
    def from_args(cls, args) -> "RunConfig":
        """Builds the configuration from a parsed argparse namespace."""
        return cls(
            path=args.path,
            mode=args.mode,
            recursive=args.recursive,
            delete_source=not args.keep,
            assume_yes=args.yes,
        )
