"""zat — package, validate and deploy helpdesk apps.

A thin CLI over the platform's apps REST API with a strict layered
architecture (cli → core → infra).
"""

from zat.version import __version__

__all__: list[str] = ["__version__"]
