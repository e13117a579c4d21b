"""Shared types for the moviedb package."""

from typing import Any

Row = dict[str, Any]
Params = tuple | list | dict
