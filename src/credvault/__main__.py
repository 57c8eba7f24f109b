# Main entry point - runs the API server with uvicorn.

import argparse

import uvicorn


def main():
    """Parse arguments and serve the credvault API."""
    from . import __version__
    from .api import create_app

    parser = argparse.ArgumentParser(
        description="credvault - encrypted payment provider credential API",
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind host (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Bind port (default: 8000)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"credvault v{__version__}"
    )

    args = parser.parse_args()

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
