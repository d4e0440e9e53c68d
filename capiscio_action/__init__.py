"""capiscio-action: validate A2A agent cards in CI with the capiscio validator."""

__version__ = "1.0.0"
