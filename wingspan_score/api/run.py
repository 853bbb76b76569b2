"""Launch script for the score keeper HTTP API."""

import logging

import uvicorn


def main():
    """Start the API server."""
    logging.basicConfig(level=logging.INFO)
    print("=" * 70)
    print("Wingspan Score Keeper API")
    print("=" * 70)
    print("\nOpen http://localhost:8000/docs in your browser")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 70 + "\n")

    uvicorn.run(
        "wingspan_score.api.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
