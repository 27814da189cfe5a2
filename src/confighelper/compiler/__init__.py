from .driver import BuildDriver, BuildParameters, CachePaths

__all__ = ["BuildDriver", "BuildParameters", "CachePaths"]
