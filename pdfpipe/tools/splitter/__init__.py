"""Page selection and splitting."""

from __future__ import annotations

from .ranges import describe_selection, iter_tokens, parse_range

__all__ = ["describe_selection", "iter_tokens", "parse_range"]
