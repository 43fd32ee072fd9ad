# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from collections.abc import Sequence
from dataclasses import dataclass

from ..exceptions import InvalidInputError, NormalizationError
from ..utils.helpers import is_url


@dataclass(frozen=True)
class PlaybackRequest:
    """The stream argument exactly as the launcher passed it in.

    The raw value is what the local player receives on fallback. It is never
    replaced by the rewritten or normalized form.
    """

    raw: str

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "PlaybackRequest":
        """Join the positional arguments into a single request.

        Raises:
            InvalidInputError: If no argument was supplied
        """
        if not args:
            raise InvalidInputError("Stream retrieval failed: no URL provided.")
        return cls(raw=" ".join(args))

    @property
    def is_url(self) -> bool:
        return is_url(self.raw)


@dataclass(frozen=True)
class NormalizedCommand:
    """Canonical URL plus the serialized control command that references it."""

    url: str
    payload: str

    def __post_init__(self):
        if not self.url:
            raise NormalizationError("Malformed stream: empty URL after normalization.")
        if not self.payload:
            raise NormalizationError("Malformed stream: empty JSON after normalization.")
