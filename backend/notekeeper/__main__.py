import uvicorn

from notekeeper.core import config


def main() -> None:
    uvicorn.run("notekeeper.main:app", host=config.server_host(), port=config.server_port())


if __name__ == "__main__":
    main()
