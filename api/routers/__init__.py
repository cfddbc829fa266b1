from . import health, vehicles

__all__ = ["health", "vehicles"]
