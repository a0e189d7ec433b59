"""
Entry point for running bifrost as a module: python -m bifrost
"""

from bifrost.cli.commands import app

if __name__ == "__main__":
    app()
