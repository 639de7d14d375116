"""Learning service: ``uvicorn vocab.learning_service:app`` or ``learning-service``."""

from vocab.config import Settings
from vocab.main import create_app, run

SERVICE_NAME = "learning-service"
DEFAULT_PORT = 8003

settings = Settings(service_name=SERVICE_NAME)
app = create_app(settings)


def main() -> None:
    run(app, settings, DEFAULT_PORT)


if __name__ == "__main__":
    main()
