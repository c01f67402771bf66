"""Main entry point for the checksum_tickler package."""
from checksum_tickler.cli import cli


def main():
    """Main entry point function."""
    cli()


if __name__ == "__main__":
    main()
