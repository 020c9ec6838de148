# servers/ditaa-renderer/src/mcp_ditaa_renderer/options.py
"""
Option resolution for ditaa diagrams.

Every diagram resolves its options once, at construction, from four layers
(highest precedence first):

  1) per-diagram overrides (tag attributes, document front matter)
  2) the site-wide ``ditaa:`` section of the configuration
  3) legacy site settings, see ``FallbackRule``
  4) compiled-in defaults

Per key the first non-null value wins. Keys outside the variant's declared
option set are dropped, then the survivors are validated into an immutable
pydantic model whose attributes are the typed accessors.
"""
from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigurationError
from .models.site_config import SiteConfig

FLAGS = ("antialias", "debug", "separation", "round", "shadows", "verbose")
FLOAT_OPTIONS = ("scale",)
INTEGER_OPTIONS = ("tabs",)
STRING_OPTIONS = ("encoding",)

NUMBER_OPTIONS = FLOAT_OPTIONS + INTEGER_OPTIONS
VALUE_OPTIONS = NUMBER_OPTIONS + STRING_OPTIONS
OPTIONS = FLAGS + VALUE_OPTIONS

# content-addressed diagrams also choose their output directory and file name
EMBEDDED_STRING_OPTIONS = ("dirname", "name") + STRING_OPTIONS
EMBEDDED_VALUE_OPTIONS = NUMBER_OPTIONS + EMBEDDED_STRING_OPTIONS
EMBEDDED_OPTIONS = FLAGS + EMBEDDED_VALUE_OPTIONS

HASH_PLACEHOLDER = "%{hash}"


class DiagramOptions(BaseModel):
    """Resolved options shared by every diagram variant."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    antialias: bool = True
    debug: bool = False
    separation: bool = True
    round: bool = False
    shadows: bool = True
    verbose: bool = False

    scale: float = 1.0
    tabs: int = 8

    # no compiled default: inherits the pipeline encoding when one is set
    encoding: Optional[str] = None

    @field_validator("scale", mode="before")
    @classmethod
    def _parse_float(cls, v: Any) -> float:
        if isinstance(v, bool):
            raise ValueError("expected a number, got a flag")
        try:
            return float(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"cannot parse {v!r} as a float") from e

    @field_validator("tabs", mode="before")
    @classmethod
    def _truncate_int(cls, v: Any) -> int:
        if isinstance(v, bool):
            raise ValueError("expected a number, got a flag")
        if isinstance(v, int):
            return v
        try:
            return int(float(v))
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"cannot parse {v!r} as an integer") from e

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding {v!r}") from e
        return v


class EmbeddedDiagramOptions(DiagramOptions):
    dirname: str = "/images/ditaa"
    name: str = f"ditaa-{HASH_PLACEHOLDER}.png"


OptionsT = TypeVar("OptionsT", bound=DiagramOptions)


def defaults_of(model: Type[DiagramOptions]) -> Dict[str, Any]:
    return {name: field.default for name, field in model.model_fields.items()}


DEFAULTS = defaults_of(DiagramOptions)
EMBEDDED_DEFAULTS = defaults_of(EmbeddedDiagramOptions)


def _legacy_flag(value: Any) -> bool:
    return value is True or str(value) == "true"


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FallbackRule:
    """Fill ``key`` from the top-level site setting ``setting`` when unset."""

    key: str
    setting: str
    convert: Callable[[Any], Any] = _identity

    def value(self, site: SiteConfig) -> Any:
        raw = site.setting(self.setting)
        return None if raw is None else self.convert(raw)


LEGACY_FALLBACKS = (
    FallbackRule("encoding", "encoding"),
    FallbackRule("debug", "ditaa_debug_mode", _legacy_flag),
)
EMBEDDED_FALLBACKS = LEGACY_FALLBACKS + (
    FallbackRule("dirname", "ditaa_output_directory"),
)


def fallback_layer(rules: Iterable[FallbackRule], site: SiteConfig) -> Dict[str, Any]:
    return {rule.key: rule.value(site) for rule in rules}


def resolve(
    defaults: Optional[Mapping[str, Any]],
    process_config: Optional[Mapping[str, Any]],
    overrides: Optional[Mapping[str, Any]],
    allowed_keys: Iterable[str],
    fallbacks: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Merge option layers and keep only ``allowed_keys``.

    Layers are scanned overrides -> process_config -> fallbacks -> defaults;
    the first non-null value seen for a key wins.
    """
    merged: Dict[str, Any] = {}
    for layer in (overrides, process_config, fallbacks, defaults):
        for key, value in (layer or {}).items():
            key = str(key)
            if value is not None and merged.get(key) is None:
                merged[key] = value

    allowed = set(allowed_keys)
    return {k: v for k, v in merged.items() if k in allowed}


def resolve_options(
    model: Type[OptionsT],
    overrides: Optional[Mapping[str, Any]],
    site: Union[SiteConfig, Mapping[str, Any], None],
    allowed_keys: Sequence[str],
    fallbacks: Iterable[FallbackRule] = LEGACY_FALLBACKS,
) -> OptionsT:
    """Resolve and validate the options of one diagram.

    Raises:
        ConfigurationError: naming the first option whose value cannot be
            coerced to its declared type.
    """
    site = SiteConfig.from_mapping(site)
    values = resolve(
        defaults_of(model),
        site.ditaa,
        overrides,
        allowed_keys,
        fallbacks=fallback_layer(fallbacks, site),
    )
    try:
        return model.model_validate(values)
    except ValidationError as e:
        err = e.errors()[0]
        key = str(err["loc"][0]) if err.get("loc") else "options"
        raise ConfigurationError(key, values.get(key), err.get("msg")) from e
