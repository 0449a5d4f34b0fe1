"""`python -m comic_site` — serve the API with uvicorn using Settings host/port."""

import uvicorn

from comic_site.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "comic_site.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
