"""Run the service with uvicorn: ``python -m itemlist``."""

from __future__ import annotations

import uvicorn

from itemlist.config import load_config
from itemlist.main import create_app


def main() -> None:
    config = load_config()
    app = create_app(config)
    # log_config=None keeps the dictConfig installed by create_app
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
