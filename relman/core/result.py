"""Ok/Err values for expected failures.

Reading the manifest, querying the registry and running git all return
``Ok(value)`` or ``Err(error)``; callers branch with ``isinstance`` or
``match`` rather than try/except.

    match load_manifest(path):
        case Ok(manifest):
            print(manifest.release_version)
        case Err(error):
            print(f"cannot read manifest: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
