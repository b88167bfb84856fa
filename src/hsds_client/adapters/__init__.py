"""Adapters to the outside world: httpx, credentials and HSDS resources."""
