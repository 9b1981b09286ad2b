"""Engine settings read from ``RICHTEXT_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from richtext_engine.document.tags import BlockTag, parse_tag
from richtext_engine.runtime.telemetry import ENV_PREFIX

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Behaviour switches shared by the session and its collaborators."""

    clear_block_tag: BlockTag = BlockTag.PARAGRAPH
    merge_text: bool = True
    keep_root_populated: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.clear_block_tag, BlockTag):
            object.__setattr__(self, "clear_block_tag", _block_tag(str(self.clear_block_tag)))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        clear_block = env.get(f"{ENV_PREFIX}CLEAR_BLOCK")
        return cls(
            clear_block_tag=_block_tag(clear_block) if clear_block else BlockTag.PARAGRAPH,
            merge_text=_flag(env, "MERGE_TEXT", True),
            keep_root_populated=_flag(env, "KEEP_ROOT_POPULATED", True),
        )


def _block_tag(name: str) -> BlockTag:
    tag = parse_tag(name)
    if not isinstance(tag, BlockTag):
        raise ValueError(f"'{name}' is an inline mark, not a block tag")
    return tag


__all__ = ["EngineConfig"]
