"""Main entry point for the HTTP orchestrator API.

Usage:
    Development: uvicorn http_orchestrator.main:app --reload --port 8000
    Production: uvicorn http_orchestrator.main:app --host 0.0.0.0 --port 8000 --workers 4
"""

from http_orchestrator.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "http_orchestrator.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
