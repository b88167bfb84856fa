"""Allows `python -m hsds_client ...`."""

from hsds_client.cli.main import run

if __name__ == "__main__":
    run()
