from cachefront.cli.app import app

__all__ = ["app"]
