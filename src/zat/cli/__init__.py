"""Command-line layer: argparse commands, prompts, Rich output, exit codes.

Handlers here wire ``core`` services to ``infra`` adapters.  Nothing in
``core`` or ``infra`` imports from this package.
"""
