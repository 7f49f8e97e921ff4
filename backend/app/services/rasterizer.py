"""Draw a visual tree onto a bitmap the size of a physical page.

Layout is a simple top-to-bottom flow: sections stack, columns split the
available width by weight, tables size each row to its tallest wrapped cell.
The container is forced to the page width while drawing so the output width
never depends on who asked for the render.
"""

import io
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from backend.app.core.errors import ExportFailure
from backend.app.core.logging import get_logger
from backend.app.services.render_pipeline import ROOT_ID, VisualNode

logger = get_logger(__name__)

CSS_DPI = 96
MM_PER_INCH = 25.4
PT_TO_PX = 4 / 3
DEFAULT_SCALE = 2

# maps an asset URL to a local file, or None when it is not one of ours
AssetResolver = Callable[[str], Optional[Path]]


@dataclass(frozen=True)
class PageSize:
    name: str
    width_mm: float
    height_mm: float

    def pixels(self, scale: float = 1) -> Tuple[int, int]:
        width = round(self.width_mm / MM_PER_INCH * CSS_DPI)
        height = round(self.height_mm / MM_PER_INCH * CSS_DPI)
        return int(width * scale), int(height * scale)


A4 = PageSize("A4", 210, 297)


@dataclass
class RasterImage:
    image: Image.Image
    page_size: PageSize
    scale: float

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def page_count_equivalent(self) -> float:
        """How many pages tall the image is at its own width."""
        return self.height / self.page_size.pixels(self.scale)[1]

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()


@contextmanager
def forced_dimensions(node: VisualNode, page_size: PageSize) -> Iterator[VisualNode]:
    """Pin ``node`` to the physical page size and put the old values back on exit."""
    previous = (node.attrs.get("width"), node.attrs.get("height"))
    node.attrs["width"] = f"{page_size.width_mm}mm"
    node.attrs["height"] = f"{page_size.height_mm}mm"
    try:
        yield node
    finally:
        node.attrs["width"], node.attrs["height"] = previous


class _Painter:
    def __init__(self, scale: float, font_path: Optional[str], resolve_asset: Optional[AssetResolver] = None):
        self.scale = scale
        self.font_path = font_path
        self.resolve_asset = resolve_asset
        self._fonts: dict = {}
        self.canvas: Optional[Image.Image] = None
        self.draw: Optional[ImageDraw.ImageDraw] = None
        self._measure = ImageDraw.Draw(Image.new("RGB", (1, 1)))

    def px(self, value: float) -> int:
        return int(round(value * self.scale))

    def font(self, size_pt: int, bold: bool = False) -> ImageFont.ImageFont:
        size = max(1, int(round(size_pt * PT_TO_PX * self.scale)))
        key = (size, bold)
        if key not in self._fonts:
            if self.font_path:
                self._fonts[key] = ImageFont.truetype(self.font_path, size)
            else:
                self._fonts[key] = ImageFont.load_default(size=size)
        return self._fonts[key]

    def _line_height(self, font) -> int:
        left, top, right, bottom = self._measure.textbbox((0, 0), "Ag", font=font)
        return int((bottom - top) * 1.4) + 1

    def wrap(self, text: str, font, width: int) -> List[str]:
        lines: List[str] = []
        for paragraph in text.split("\n"):
            current = ""
            for word in paragraph.split(" "):
                candidate = f"{current} {word}" if current else word
                if current and self._measure.textlength(candidate, font=font) > width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def text_block(self, text: str, x: int, y: int, width: int, *, size: int, bold: bool = False,
                   align: str = "left", color: str = "#000000") -> int:
        font = self.font(size, bold)
        line_height = self._line_height(font)
        lines = self.wrap(text, font, width)
        for offset, line in enumerate(lines):
            if self.draw is not None:
                line_width = self._measure.textlength(line, font=font)
                if align == "center":
                    left = x + (width - line_width) / 2
                elif align == "right":
                    left = x + width - line_width
                else:
                    left = x
                self.draw.text((left, y + offset * line_height), line, font=font, fill=color)
                if bold:
                    self.draw.text((left + 1, y + offset * line_height), line, font=font, fill=color)
        return len(lines) * line_height

    def layout(self, node: VisualNode, x: int, y: int, width: int, align: str = "left") -> int:
        """Lay out ``node`` at (x, y); draws when a canvas is attached. Returns the height used."""
        if node.kind == "text":
            return self.text_block(node.text or "", x, y, width, size=node.attrs.get("size", 11),
                                   bold=node.attrs.get("bold", False), align=node.attrs.get("align", align),
                                   color=node.attrs.get("color", "#000000"))
        if node.kind in ("section", "document"):
            used = 0
            for child in node.children:
                if child.kind == "watermark":
                    continue
                used += self.layout(child, x, y + used, width, node.attrs.get("align", align))
                used += self.px(4)
            return used
        if node.kind == "columns":
            return self._columns(node, x, y, width)
        if node.kind == "table":
            return self._table(node, x, y, width)
        if node.kind == "divider":
            gap = self.px(8)
            if self.draw is not None:
                self.draw.line([(x, y + gap), (x + width, y + gap)], fill="#d1d5db", width=max(1, self.px(1)))
            return gap * 2
        if node.kind == "logo":
            return self._logo(node, x, y, width, align)
        raise ExportFailure(f"Cannot draw node of kind {node.kind!r}", {"kind": node.kind})

    def _columns(self, node: VisualNode, x: int, y: int, width: int) -> int:
        weights = node.attrs.get("weights") or [1] * len(node.children)
        gutter = self.px(12)
        usable = width - gutter * (len(node.children) - 1)
        total_weight = sum(weights)
        tallest = 0
        left = x
        for child, weight in zip(node.children, weights):
            column_width = int(usable * weight / total_weight)
            tallest = max(tallest, self.layout(child, left, y, column_width, child.attrs.get("align", "left")))
            left += column_width + gutter
        return tallest

    def _table(self, node: VisualNode, x: int, y: int, width: int) -> int:
        header = node.attrs.get("header", [])
        rows = node.attrs.get("rows", [])
        aligns = node.attrs.get("align") or ["left"] * len(header)
        weights = node.attrs.get("weights") or [1] * len(header)
        size = node.attrs.get("size", 11)
        total_weight = sum(weights)
        widths = [int(width * weight / total_weight) for weight in weights]
        padding = self.px(4)
        used = 0
        for row_index, row in enumerate([header] + rows):
            bold = row_index == 0
            font = self.font(size, bold)
            row_height = max(
                len(self.wrap(str(cell), font, column_width - 2 * padding)) * self._line_height(font)
                for cell, column_width in zip(row, widths)
            ) + 2 * padding
            if self.draw is not None:
                fill = node.attrs.get("header_background") if bold else None
                left = x
                for column_width in widths:
                    self.draw.rectangle([left, y + used, left + column_width, y + used + row_height],
                                        fill=fill, outline="#d1d5db")
                    left += column_width
            left = x
            for cell, column_width, cell_align in zip(row, widths, aligns):
                self.text_block(str(cell), left + padding, y + used + padding, column_width - 2 * padding,
                                size=size, bold=bold, align=cell_align)
                left += column_width
            used += row_height
        return used

    def _logo(self, node: VisualNode, x: int, y: int, width: int, align: str) -> int:
        side = self.px(node.attrs.get("size", 64))
        if align == "right":
            left = x + width - side
        elif align == "center":
            left = x + (width - side) // 2
        else:
            left = x
        if self.draw is not None:
            logo_path = self._asset_path(node.attrs.get("url"))
            if logo_path is not None and logo_path.is_file():
                with Image.open(logo_path) as logo:
                    logo = logo.convert("RGBA")
                    logo.thumbnail((side, side))
                    self.canvas.paste(logo, (left, y), logo)
            else:
                self.draw.rectangle([left, y, left + side, y + side], outline="#d1d5db")
                self.text_block("LOGO", left, y + side // 3, side, size=8, align="center", color="#9ca3af")
        return side

    def _asset_path(self, url: Optional[str]) -> Optional[Path]:
        if not url:
            return None
        if self.resolve_asset is not None:
            resolved = self.resolve_asset(url)
            if resolved is not None:
                return resolved
        return Path(url) if "://" not in url else None

    def watermark(self, canvas: Image.Image, node: VisualNode, page_height: int) -> Image.Image:
        font = self.font(48, bold=True)
        text = node.text or ""
        text_width = int(self._measure.textlength(text, font=font)) + 2
        text_height = self._line_height(font)
        stamp = Image.new("RGBA", (text_width, text_height), (255, 255, 255, 0))
        alpha = int(255 * node.attrs.get("opacity", 0.15))
        ImageDraw.Draw(stamp).text((0, 0), text, font=font, fill=(156, 163, 175, alpha))
        stamp = stamp.rotate(node.attrs.get("angle", 45), expand=True)
        layer = Image.new("RGBA", canvas.size, (255, 255, 255, 0))
        position = ((canvas.width - stamp.width) // 2, (page_height - stamp.height) // 2)
        layer.paste(stamp, position, stamp)
        return Image.alpha_composite(canvas.convert("RGBA"), layer).convert("RGB")


def _mm(value: str) -> float:
    return float(str(value).removesuffix("mm"))


def rasterize(
    tree: VisualNode,
    page_size: PageSize = A4,
    scale: float = DEFAULT_SCALE,
    element_id: str = ROOT_ID,
    font_path: Optional[str] = None,
    resolve_asset: Optional[AssetResolver] = None,
) -> RasterImage:
    """Render the node ``element_id`` of ``tree`` to a page-width bitmap.

    The image is exactly one page wide at ``scale`` and at least one page tall;
    taller content extends the canvas instead of being clipped.
    Logo URLs are looked up through ``resolve_asset`` first, then tried as a
    local path; anything else is drawn as a placeholder box.
    """
    target = tree.find(element_id)
    if target is None:
        raise ExportFailure(f"Element {element_id!r} not found in the visual tree", {"element_id": element_id})

    with forced_dimensions(target, page_size):
        painter = _Painter(scale, font_path, resolve_asset)
        forced = PageSize(page_size.name, _mm(target.attrs["width"]), _mm(target.attrs["height"]))
        page_width, page_height = forced.pixels(scale)
        margin = painter.px(24)
        content_width = page_width - 2 * margin
        try:
            content_height = painter.layout(target, margin, margin, content_width)
            canvas = Image.new("RGB", (page_width, max(page_height, content_height + 2 * margin)), "#ffffff")
            watermark = next((child for child in target.children if child.kind == "watermark"), None)
            if watermark is not None:
                canvas = painter.watermark(canvas, watermark, page_height)
            painter.canvas = canvas
            painter.draw = ImageDraw.Draw(canvas)
            painter.layout(target, margin, margin, content_width)
        except (OSError, ValueError) as exc:
            logger.error("Rasterizing %s failed: %s", element_id, exc)
            raise ExportFailure("Could not draw the document", {"element_id": element_id, "error": str(exc)}) from exc

    logger.debug("Rasterized %s to %sx%s", element_id, canvas.width, canvas.height)
    return RasterImage(image=canvas, page_size=page_size, scale=scale)
