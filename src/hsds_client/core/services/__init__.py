"""Multi-step workflows built on top of `HsdsClient`."""
