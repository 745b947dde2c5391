"""Import result dataclass."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .raster import PixelBuffer


@dataclass
class ImportResult:
    """Outcome of importing one gradient texture definition.

    ``texture`` is set whenever rasterization succeeded, even if a later
    write or export failed; those failures are listed in ``errors``.
    """

    source: str
    texture: Optional[PixelBuffer] = None
    texture_settings: Dict[str, Any] = field(default_factory=dict)
    texture_path: Optional[str] = None
    output_path: Optional[str] = None
    exported: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.texture is not None and not self.errors

    @property
    def error(self) -> Optional[str]:
        """First recorded error, or None."""
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict:
        """Return a JSON-friendly summary (pixels omitted)."""
        return {
            "source": self.source,
            "width": self.texture.width if self.texture is not None else None,
            "height": self.texture.height if self.texture is not None else None,
            "texture_settings": dict(self.texture_settings),
            "texture_path": self.texture_path,
            "output_path": self.output_path,
            "exported": self.exported,
            "errors": list(self.errors),
        }
