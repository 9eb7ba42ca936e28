# src/gotestlens/__main__.py

from gotestlens.cli.main import cli

if __name__ == "__main__":
    cli()
