"""Configuration of the actions module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import yaml

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class ActionsConfig:
    """Port the actions worker listens on and the node it may query instead."""

    port: int = DEFAULT_PORT
    node: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int) or self.port < 0:
            raise ValueError(f"invalid actions port: {self.port!r}")
        if self.node is not None and not isinstance(self.node, Mapping):
            raise ValueError(f"invalid actions node details: {self.node!r}")


def parse_config(data: Union[bytes, str]) -> Optional[ActionsConfig]:
    """Read the ``actions`` section of a YAML document.

    Returns None when the document has no such section.
    """
    text = data.decode() if isinstance(data, (bytes, bytearray)) else data
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid configuration: {exc}") from exc

    if document is None:
        return None
    if not isinstance(document, Mapping):
        raise ValueError("invalid configuration: the document is not a mapping")

    section = document.get("actions")
    if section is None:
        return None
    if not isinstance(section, Mapping):
        raise ValueError("invalid configuration: the actions section is not a mapping")

    node = section.get("node")
    return ActionsConfig(
        port=section.get("port", 0) if section.get("port") is not None else 0,
        node=dict(node) if isinstance(node, Mapping) else node,
    )