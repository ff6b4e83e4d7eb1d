"""Allow ``python -m zat`` invocation.

Delegates to the CLI error-boundary entry point so that ``python -m zat``
behaves identically to the ``zat`` console script.
"""

from __future__ import annotations

from zat.cli.app import cli

if __name__ == "__main__":
    cli()
