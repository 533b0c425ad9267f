import uvicorn

from public_ip_lookup.config import get_settings


def main() -> None:
    """Run the FastAPI application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "public_ip_lookup.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
