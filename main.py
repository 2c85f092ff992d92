# main.py

from subprocess import run
from sys import executable


def start(cmmd: list[str]) -> None:
    run(cmmd, check=True)


def main() -> None:
    cmmd = [
        executable,
        "-m",
        "uvicorn",
        "blogcms.main:app",
        "--host",
        "127.0.0.1",
        "--port",
        "8000",
        "--reload",
        "--log-level",
        "info",
    ]
    start(cmmd)


if __name__ == "__main__":
    main()
