"""
Layout and connector configuration.

Defaults mirror the conventional genogram proportions: square 150px boxes,
30px between neighbours of one generation and 60px between generations.
"""

from dataclasses import dataclass, field

from models import MarriageStatus, Orientation, Size

DEFAULT_BOX_SIZE = Size(150.0, 150.0)
DEFAULT_SPACING = 30.0
DEFAULT_RUN_SPACING = 60.0

DEFAULT_MARRIAGE_COLORS: tuple[str, ...] = (
    "#1f77b4",
    "#d62728",
    "#2ca02c",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#17becf",
    "#bcbd22",
)


@dataclass(frozen=True)
class LayoutConfig:
    box_size: Size = DEFAULT_BOX_SIZE
    spacing: float = DEFAULT_SPACING
    run_spacing: float = DEFAULT_RUN_SPACING
    orientation: Orientation = Orientation.TOP_TO_BOTTOM

    @property
    def min_pos(self) -> float:
        """Smallest primary-axis coordinate a node may be placed at."""
        return self.spacing * 2

    @property
    def root_gap(self) -> float:
        """Gap between independent family trees."""
        return self.spacing * 3


@dataclass(frozen=True)
class MarriageStyle:
    stroke_width: float = 2.0
    line_style: str = "solid"  # "solid" | "dashed" | "dotted"


def _default_marriage_styles() -> dict[MarriageStatus, MarriageStyle]:
    return {
        MarriageStatus.MARRIED: MarriageStyle(2.0, "solid"),
        MarriageStatus.DIVORCED: MarriageStyle(2.0, "dashed"),
        MarriageStatus.SEPARATED: MarriageStyle(1.0, "dotted"),
    }


@dataclass(frozen=True)
class EdgeStyle:
    marriage_colors: tuple[str, ...] = DEFAULT_MARRIAGE_COLORS
    marriage_styles: dict[MarriageStatus, MarriageStyle] = field(
        default_factory=_default_marriage_styles
    )
    child_stroke_width: float = 2.0
    child_single_parent_color: str = "#9e9e9e"
    child_single_parent_stroke_width: float = 1.5
    junction_color: str = "#ff9800"
    junction_radius: float = 16.0
    stub_length: float = 24.0

    def marriage_style(self, status: MarriageStatus) -> MarriageStyle:
        return self.marriage_styles.get(status, self.marriage_styles[MarriageStatus.MARRIED])
