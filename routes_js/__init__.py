"""routes-js: generate JavaScript/TypeScript route helpers from a route table."""

__version__ = "0.1.0"
