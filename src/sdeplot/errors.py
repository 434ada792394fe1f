"""Usage errors raised by the streaming plot controller.

All of these indicate a miswired solver/output-function pairing rather than a
transient condition, so they propagate to the caller. A plot window closed by
the user is *not* an error; it is reported through the status return value.
"""

from __future__ import annotations

__all__ = [
    "SdePlotError",
    "NotInitializedError",
    "InitializationMismatchError",
    "InvalidFlagError",
]


class SdePlotError(RuntimeError):
    """Base class carrying a stable ``identifier`` for programmatic checks."""

    identifier = "sdeplot:Error"

    def __init__(self, message: str, *, identifier: str | None = None) -> None:
        super().__init__(message)
        if identifier is not None:
            self.identifier = identifier


class NotInitializedError(SdePlotError):
    """``step``/``done`` was called without an active session."""

    identifier = "sdeplot:NotCalledWithInit"

    @classmethod
    def for_call(cls, *, with_noise: bool) -> "NotInitializedError":
        if with_noise:
            return cls(
                "Output function has not been initialized. "
                "Use syntax output_fn(tspan, y0, 'init', w0).",
                identifier="sdeplot:NotCalledWithInitW",
            )
        return cls(
            "Output function has not been initialized. "
            "Use syntax output_fn(tspan, y0, 'init').",
        )


class InitializationMismatchError(SdePlotError):
    """Noise argument presence disagrees with what ``init`` established."""

    identifier = "sdeplot:InitializationMismatch"

    @classmethod
    def for_call(cls, operation: str, *, noise_enabled: bool) -> "InitializationMismatchError":
        if noise_enabled:
            detail = "was initialized with noise increments but '%s' was called without them"
        else:
            detail = "was initialized without noise increments but '%s' was called with them"
        return cls("Output function " + detail % operation + ".")


class InvalidFlagError(SdePlotError):
    """Operation selector outside ``init``/``step``/``done``."""

    identifier = "sdeplot:InvalidFlag"

    @classmethod
    def for_flag(cls, flag: object) -> "InvalidFlagError":
        return cls(f"Invalid status flag passed to output function: {flag!r}.")
