"""Allow `python -m cloudlink`."""

from cloudlink.cli import app

if __name__ == "__main__":
    app()
