"""
Process environment overrides.

An override is a ``(name, value)`` pair where a ``None`` value means the
variable is removed.
"""
import os
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Sequence, Tuple

EnvironmentOverride = Tuple[str, Optional[str]]


def set_variable(name: str, value: str):
    os.environ[name] = value


def unset_variable(name: str):
    os.environ.pop(name, None)


def apply_environment(overrides: Iterable[EnvironmentOverride]):
    """Apply overrides permanently, in order."""
    for name, value in overrides:
        if value is None:
            unset_variable(name)
        else:
            set_variable(name, value)


@contextmanager
def custom_environment(overrides: Sequence[EnvironmentOverride]) -> Iterator[None]:
    """
    Apply overrides for the duration of the block and restore the previous
    values on every exit path.
    """
    saved = [(name, os.environ.get(name)) for name, _ in overrides]
    try:
        apply_environment(overrides)
        yield
    finally:
        # Reversed so a variable named twice ends at its original value
        apply_environment(reversed(saved))


def normalize_overrides(raw) -> Tuple[EnvironmentOverride, ...]:
    """
    Accepts the config file form (list of ``[name, value]`` pairs or a
    ``{name: value}`` mapping) and returns an immutable tuple of pairs.
    """
    if not raw:
        return ()
    pairs = raw.items() if isinstance(raw, dict) else raw
    overrides = []
    for name, value in pairs:
        overrides.append((str(name), None if value is None else str(value)))
    return tuple(overrides)
