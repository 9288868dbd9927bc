"""
Model alias resolution for OpenCode.

Claude Code lets agents and commands name a model family ("haiku", "sonnet").
OpenCode expects fully-qualified "provider/model-id" identifiers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .utils import logger

# Claude Code keyword meaning "use whatever the host is running"
INHERIT_MODEL = "inherit"

PRECISE_TEMPERATURE = 0.1


@dataclass(frozen=True)
class ModelInfo:
    model_id: str
    precise: bool = False  # reasoning/review oriented, gets a low temperature


class ModelAlias(Enum):
    HAIKU = ModelInfo("anthropic/claude-haiku-4-5")
    SONNET = ModelInfo("anthropic/claude-sonnet-4-20250514", precise=True)
    OPUS = ModelInfo("anthropic/claude-opus-4-1", precise=True)

    @classmethod
    def lookup(cls, alias: str) -> Optional["ModelAlias"]:
        return cls.__members__.get(alias.strip().upper())


_PRECISE_MODELS = frozenset(a.value.model_id for a in ModelAlias if a.value.precise)


def resolve_model(model_ref: Optional[str]) -> Optional[str]:
    """
    Map a Claude model reference to an OpenCode model id.

    - None / "inherit" -> None (caller decides the fallback)
    - "provider/model" -> unchanged
    - known alias      -> table entry
    - anything else    -> unchanged
    """
    if model_ref is None:
        return None
    ref = model_ref.strip()
    if not ref or ref == INHERIT_MODEL:
        return None
    if "/" in ref:
        return ref

    alias = ModelAlias.lookup(ref)
    if alias is None:
        logger.debug("Unknown model alias %r, passing through", ref)
        return ref
    return alias.value.model_id


def infer_temperature(resolved_model: Optional[str]) -> Optional[float]:
    """Return a low sampling temperature for precise models, else None."""
    if resolved_model in _PRECISE_MODELS:
        return PRECISE_TEMPERATURE
    return None
