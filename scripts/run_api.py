import uvicorn

from api_errors.config import load_app_config


def main() -> None:
    config = load_app_config()

    uvicorn.run(
        "apps.api.app.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
