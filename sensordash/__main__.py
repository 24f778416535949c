# sensordash/__main__.py
import uvicorn

from sensordash.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "sensordash.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
