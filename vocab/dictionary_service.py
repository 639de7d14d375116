"""Dictionary service: ``uvicorn vocab.dictionary_service:app`` or ``dictionary-service``."""

from vocab.config import Settings
from vocab.main import create_app, run

SERVICE_NAME = "dictionary-service"
DEFAULT_PORT = 8002

settings = Settings(service_name=SERVICE_NAME)
app = create_app(settings)


def main() -> None:
    run(app, settings, DEFAULT_PORT)


if __name__ == "__main__":
    main()
