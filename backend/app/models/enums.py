"""Enumerations for the API."""

from enum import Enum


class Visibility(str, Enum):
    """Who may read a record."""

    PUBLIC = "public"
    PRIVATE = "private"
    SHARED = "shared"


class RecordKind(str, Enum):
    """Record families kept in the directory."""

    PROMPT = "prompt"
    TOOL = "tool"
