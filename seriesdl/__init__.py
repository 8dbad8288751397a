"""Search AnimeUnity, download episodes and keep a per-user watch history."""

__version__ = "0.1.0"
__all__ = ["__version__"]