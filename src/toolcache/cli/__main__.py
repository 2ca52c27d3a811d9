"""toolcache CLI module entry point.

Enables running the CLI via: python -m toolcache.cli
"""

from toolcache.cli.main import cli

if __name__ == "__main__":
    cli()
