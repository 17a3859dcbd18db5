import uvicorn

from yaya_proxy.app import create_app
from yaya_proxy.config import Settings


def run() -> None:
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
