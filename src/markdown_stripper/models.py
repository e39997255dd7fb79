# -*- coding: utf-8 -*-
"""
Pydantic data models for stripper options.
"""
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class StripOptions(BaseModel):
    """
    Options for a single strip call.

    Immutable; every field has a default. Fields accept both their Python
    name and the camelCase name used by the JavaScript ecosystem
    (``use_img_alt_text`` / ``useImgAltText``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    list_unicode_char: str | None = Field(
        default=None,
        alias="listUnicodeChar",
        description="Replace list markers with this character instead of deleting them",
    )
    strip_list_leaders: bool = Field(
        default=True,
        alias="stripListLeaders",
        description="Touch list markers at all",
    )
    gfm: bool = Field(
        default=True,
        description="GitHub-flavored tweaks: setext underlines, fence lines, strikethrough",
    )
    use_img_alt_text: bool = Field(
        default=True,
        alias="useImgAltText",
        description="Images become their alt-text instead of being deleted",
    )
    abbr: bool = Field(
        default=False,
        description="Remove abbreviation definition lines like *[HTML]: ...",
    )
    replace_links_with_url: bool = Field(
        default=False,
        alias="replaceLinksWithURL",
        description="Links render as their URL instead of their text",
    )
    html_tags_to_skip: frozenset[str] = Field(
        default=frozenset(),
        alias="htmlTagsToSkip",
        description="HTML tag names left untouched (opening and closing tags)",
    )
    throw_error: bool = Field(
        default=False,
        alias="throwError",
        description="Propagate internal failures instead of returning the input",
    )

    @field_validator("list_unicode_char", mode="before")
    @classmethod
    def _falsy_char_disables(cls, value: Any) -> Any:
        # false / "" both mean "delete the marker"
        if value is False or value == "":
            return None
        return value

    @classmethod
    def merge(
            cls,
            options: "StripOptions | Mapping[str, Any] | None" = None,
            **overrides: Any,
    ) -> "StripOptions":
        """
        Merge defaults, a base options value and keyword overrides.

        Raises:
            ConfigurationError: unknown option name or invalid value
        """
        if isinstance(options, StripOptions):
            if not overrides:
                return options
            merged = options.model_dump()
        elif options is None:
            merged = {}
        elif isinstance(options, Mapping):
            merged = _by_field_name(options)
        else:
            raise ConfigurationError(
                f"options must be StripOptions or a mapping, got {type(options).__name__}"
            )
        merged.update(_by_field_name(overrides))

        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid strip options: {e}") from e


def _by_field_name(values: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase aliases to field names."""
    aliases = {
        info.alias: name
        for name, info in StripOptions.model_fields.items()
        if info.alias
    }
    return {aliases.get(key, key): value for key, value in values.items()}
