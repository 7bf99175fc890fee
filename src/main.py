"""Main entry point for the terminal todo list.

`todo` with no arguments opens the interactive view; see cli.py for the
print-only subcommands.
"""
from cli import cli


def main():
    cli(prog_name='todo')

if __name__ == "__main__":
    main()
