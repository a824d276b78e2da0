# config.py
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

APP_NAME = "sgftree"
APP_VERSION = "0.1.0"

Color = Tuple[float, float, float]


@dataclass
class GameDefaults:
    """Header properties of a freshly created game node."""
    gm: str = "1"
    ff: str = "4"
    ca: str = "UTF-8"
    ap: str = f"{APP_NAME}:{APP_VERSION}"
    km: str = "6.5"
    sz: str = "19"
    # None: today's UTC date
    dt: Optional[str] = None

    def to_properties(self) -> dict:
        dt = self.dt
        if dt is None:
            dt = datetime.now(timezone.utc).date().isoformat()
        # canonical order of properties in SGF header
        return {
            "GM": self.gm,
            "FF": self.ff,
            "CA": self.ca,
            "AP": self.ap,
            "KM": self.km,
            "SZ": self.sz,
            "DT": dt,
        }


@dataclass
class RenderConfig:
    node_radius: int = 3
    level_vgap: int = 24
    sibling_hgap: int = 12
    margin: int = 8
    font_size: int = 12
    background: Color = (1.0, 1.0, 1.0)
    edge_color: Color = (0.75, 0.75, 0.75)
    mainline_edge_color: Color = (0.45, 0.45, 0.45)
    move_color: Color = (0.15, 0.15, 0.15)
    variation_color: Color = (0.65, 0.65, 0.65)
    diamond_fill: Color = (0.98, 0.98, 0.98)
    diamond_stroke: Color = (0.2, 0.2, 0.2)
    highlight_color: Color = (0.05, 0.5, 0.95)
