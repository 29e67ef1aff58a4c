"""Run the HTTP API: ``python -m treegen``."""

import uvicorn

from treegen.shared.config import load_config


def main() -> None:
    config = load_config()
    uvicorn.run(
        "treegen.api.app:app",
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
