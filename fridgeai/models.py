"""Data types for scan requests, parsed results, and history entries."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_MIME = "image/jpeg"


@dataclass(frozen=True)
class EncodedImage:
    """A single encoded still frame (JPEG/PNG bytes plus its MIME type)."""

    data: bytes
    mime_type: str = _DEFAULT_MIME

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("image payload is empty")

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str = _DEFAULT_MIME) -> EncodedImage:
        return cls(data=data, mime_type=mime_type or _DEFAULT_MIME)

    @classmethod
    def from_path(cls, path: str | Path) -> EncodedImage:
        p = Path(path)
        mime_type = mimetypes.guess_type(p.name)[0] or _DEFAULT_MIME
        return cls(data=p.read_bytes(), mime_type=mime_type)

    @classmethod
    def from_data_uri(cls, uri: str) -> EncodedImage:
        """Decode ``data:<mime>;base64,<payload>`` or a bare base64 string."""
        mime_type = _DEFAULT_MIME
        payload = uri.strip()
        if payload.startswith("data:"):
            header, sep, payload = payload.partition(",")
            if not sep:
                raise ValueError("malformed data URI: missing ','")
            media = header[len("data:"):].split(";")[0]
            if media:
                mime_type = media
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"image payload is not valid base64: {e}") from e
        return cls(data=data, mime_type=mime_type)

    @property
    def base64(self) -> str:
        return base64.standard_b64encode(self.data).decode("ascii")

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


@dataclass(frozen=True)
class ScanRequest:
    """One outbound inference call: the image, the fixed instructions and the output cap."""

    image: EncodedImage
    instructions: str
    max_tokens: int = 500


def _str_tuple(data: dict, key: str) -> tuple[str, ...]:
    """Read an optional JSON array of strings; anything but a list is rejected."""
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Recipe:
    title: str = ""
    cook_time: str = ""  # free text, e.g. "20 minutes"
    ingredients: tuple[str, ...] = ()
    instructions: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "cookTime": self.cook_time,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Recipe:
        if not isinstance(data, dict):
            raise TypeError(f"recipe must be an object, got {type(data).__name__}")
        return cls(
            title=str(data.get("title") or ""),
            cook_time=str(data.get("cookTime") or ""),
            ingredients=_str_tuple(data, "ingredients"),
            instructions=_str_tuple(data, "instructions"),
        )


@dataclass(frozen=True)
class ScanResult:
    found_ingredients: tuple[str, ...] = ()
    recipes: tuple[Recipe, ...] = ()

    def to_dict(self) -> dict:
        return {
            "foundIngredients": list(self.found_ingredients),
            "recipes": [r.to_dict() for r in self.recipes],
        }

    def display(self) -> str:
        """Format the scan result for terminal display."""
        lines: list[str] = []
        if self.found_ingredients:
            lines.append(f"Found ingredients ({len(self.found_ingredients)}):")
            lines.append("  " + ", ".join(self.found_ingredients))
        else:
            lines.append("No ingredients found.")

        if not self.recipes:
            lines.append("No recipes suggested.")
            return "\n".join(lines)

        lines.append("")
        lines.append(f"Possible recipes ({len(self.recipes)}):")
        for recipe in self.recipes:
            time_note = f"  [{recipe.cook_time}]" if recipe.cook_time else ""
            lines.append(f"  * {recipe.title}{time_note}")
            if recipe.ingredients:
                lines.append(f"    Ingredients: {', '.join(recipe.ingredients)}")
            for n, step in enumerate(recipe.instructions, start=1):
                lines.append(f"    {n}. {step}")
        return "\n".join(lines)


@dataclass(frozen=True)
class HistoryEntry:
    """A ScanResult tagged with a unique id and the epoch-ms time it was stored."""

    id: str
    timestamp: int
    found_ingredients: tuple[str, ...] = ()
    recipes: tuple[Recipe, ...] = ()

    @property
    def result(self) -> ScanResult:
        return ScanResult(
            found_ingredients=self.found_ingredients, recipes=self.recipes
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            **self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        """Build an entry from its JSON form.

        Raises:
            KeyError, TypeError, ValueError: if ``data`` is not a valid entry.
        """
        if not isinstance(data, dict):
            raise TypeError(f"history entry must be an object, got {type(data).__name__}")
        entry_id = data["id"]
        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError("history entry id must be a non-empty string")
        timestamp = data["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError("history entry timestamp must be an integer")
        recipes = data.get("recipes") or []
        if not isinstance(recipes, list):
            raise TypeError("history entry recipes must be a list")
        return cls(
            id=entry_id,
            timestamp=timestamp,
            found_ingredients=_str_tuple(data, "foundIngredients"),
            recipes=tuple(Recipe.from_dict(r) for r in recipes),
        )
