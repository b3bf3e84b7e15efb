"""Run the API with uvicorn: python -m cash_drawer"""

import uvicorn

from cash_drawer.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cash_drawer.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
