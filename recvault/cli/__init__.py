"""Record vault CLI.

A thin command-line client over the record store, built with Click and Rich.
"""

from recvault.cli.main import cli

__all__ = ["cli"]
