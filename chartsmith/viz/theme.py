from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from chartsmith.schemas.chart import ColorMap, Theme

RGB = Tuple[int, int, int]

# Colorblind-friendly palettes; the dark variant is lightened for contrast.
LIGHT_PRIMARY: Tuple[RGB, ...] = (
    (31, 119, 180),
    (255, 127, 14),
    (44, 160, 44),
    (214, 39, 40),
    (148, 103, 189),
    (140, 86, 75),
    (227, 119, 194),
    (127, 127, 127),
    (188, 189, 34),
    (23, 190, 207),
)
DARK_PRIMARY: Tuple[RGB, ...] = (
    (114, 158, 206),
    (255, 158, 74),
    (103, 191, 92),
    (237, 102, 93),
    (173, 139, 201),
    (168, 120, 110),
    (237, 151, 202),
    (162, 162, 162),
    (205, 204, 93),
    (109, 204, 218),
)

# Low / high endpoint colors for heatmap colormaps.
COLORMAP_ENDPOINTS: Dict[ColorMap, Tuple[RGB, RGB]] = {
    ColorMap.VIRIDIS: ((68, 1, 84), (253, 231, 37)),
    ColorMap.PLASMA: ((13, 8, 135), (240, 249, 33)),
    ColorMap.BLUES: ((222, 235, 247), (8, 48, 107)),
    ColorMap.REDS: ((254, 224, 210), (103, 0, 13)),
    ColorMap.GREENS: ((229, 245, 224), (0, 68, 27)),
}


def to_css(color: RGB, alpha: float = 1.0) -> str:
    r, g, b = (max(0, min(255, int(c))) for c in color)
    if alpha >= 1.0:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"rgba({r},{g},{b},{alpha:g})"


@dataclass(frozen=True)
class TextColors:
    title: RGB
    axis_labels: RGB
    data_labels: RGB
    grid: RGB


@dataclass(frozen=True)
class BackgroundColors:
    chart: RGB
    canvas: RGB


@dataclass(frozen=True)
class ColorPalette:
    primary: Tuple[RGB, ...]
    text: TextColors
    background: BackgroundColors


@dataclass(frozen=True)
class FontSizes:
    title: int = 36
    axis_description: int = 20
    axis_labels: int = 16
    legend: int = 14


@dataclass(frozen=True)
class Typography:
    font_family: str = "sans-serif"
    sizes: FontSizes = field(default_factory=FontSizes)


@dataclass(frozen=True)
class Margins:
    chart: int = 30
    complex: int = 40


@dataclass(frozen=True)
class AreaSizes:
    x_label_area: int = 80
    y_label_area: int = 80
    legend_area: int = 60


@dataclass(frozen=True)
class ElementSizes:
    line_points: int = 4
    line_width: int = 2
    bar_spacing: float = 0.8


@dataclass(frozen=True)
class Layout:
    margins: Margins = field(default_factory=Margins)
    areas: AreaSizes = field(default_factory=AreaSizes)
    elements: ElementSizes = field(default_factory=ElementSizes)


@dataclass(frozen=True)
class Spacing:
    element_padding: int = 10
    series_spacing: int = 5
    text_padding: int = 8


@dataclass(frozen=True)
class HeatmapStyle:
    intensity_range: Tuple[float, float] = (60.0, 180.0)
    gradient_colors: Tuple[RGB, RGB] = ((180, 190, 200), (60, 80, 120))


@dataclass(frozen=True)
class ChartStyle:
    """Everything a renderer needs to know about colors, fonts and spacing for one theme."""

    theme: Theme
    colors: ColorPalette
    typography: Typography = field(default_factory=Typography)
    layout: Layout = field(default_factory=Layout)
    spacing: Spacing = field(default_factory=Spacing)
    heatmap: HeatmapStyle = field(default_factory=HeatmapStyle)

    def primary_color(self, index: int) -> RGB:
        return self.colors.primary[index % len(self.colors.primary)]


def _palette(theme: Theme) -> ColorPalette:
    if theme == Theme.DARK:
        return ColorPalette(
            primary=DARK_PRIMARY,
            text=TextColors(
                title=(248, 249, 250),
                axis_labels=(200, 200, 200),
                data_labels=(180, 180, 180),
                grid=(73, 80, 87),
            ),
            background=BackgroundColors(chart=(33, 37, 41), canvas=(33, 37, 41)),
        )
    return ColorPalette(
        primary=LIGHT_PRIMARY,
        text=TextColors(
            title=(33, 37, 41),
            axis_labels=(80, 80, 80),
            data_labels=(100, 100, 100),
            grid=(222, 226, 230),
        ),
        background=BackgroundColors(chart=(255, 255, 255), canvas=(255, 255, 255)),
    )


def resolve_style(theme: Optional[Theme] = None) -> ChartStyle:
    theme = theme or Theme.LIGHT
    return ChartStyle(theme=theme, colors=_palette(theme))
