"""
Groupix CLI - Command-line interface for the copy jobs.

Operations:
    groupix copy-memories              # newest rows of `memories`, prod -> dev
    groupix copy-storage               # bucket objects, prod -> dev
    groupix copy-storage -c 8          # eight transfers in flight

This creates the 'groupix' command via entry point in pyproject.toml.
"""

from groupix.cli.app import cli


def main():
    """Main entry point for the groupix CLI."""
    cli()


if __name__ == "__main__":
    main()
