"""Entry point for the checksum API."""

import uvicorn


def main():
    """Start the checksum API server."""
    uvicorn.run("checksum_api.api:app", host="127.0.0.1", port=8000, reload=True)


if __name__ == "__main__":
    main()
