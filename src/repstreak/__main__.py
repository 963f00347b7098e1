"""Main entry point for the repstreak package."""

from repstreak.cli import app


def main():
    """Run the repstreak command-line interface."""
    app()


if __name__ == "__main__":
    main()
