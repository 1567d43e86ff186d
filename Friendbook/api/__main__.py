import uvicorn

from Friendbook.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "Friendbook.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
