"""Entry point for running toolgate as a module."""

from toolgate.cli import app


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
