import logging

import uvicorn

from .config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger(__name__).info(
        "Serving recipes from %s", settings.data_dir.resolve()
    )
    uvicorn.run("cookbook.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
