# tree_render.py
# Draw a game tree as a diagram: one row per depth, root at the top.
import math
from typing import Dict, List, Optional, Tuple

import cairo

from sgftree.config import RenderConfig
from sgftree.game_tree import Node

DEBUG = False


class _DrawNode:
    def __init__(self, node_obj: Node, x: float, y: float, radius: float, is_variation: bool, on_mainline: bool):
        self.node = node_obj
        self.x = x
        self.y = y
        self.radius = radius
        self.is_variation = is_variation
        self.on_mainline = on_mainline


class TreeLayout:
    """
    Level layout of a tree.
    - draw_nodes: _DrawNode list in preorder (root first)
    - edges: (parent_idx, child_idx) pairs into draw_nodes
    - width / height: size of the canvas needed
    """

    def __init__(self, root: Optional[Node], config: Optional[RenderConfig] = None):
        self.config = config if config is not None else RenderConfig()
        self.draw_nodes: List[_DrawNode] = []
        self.edges: List[Tuple[int, int]] = []
        self.width = 0.0
        self.height = 0.0
        if root is not None:
            self._compute(root)

    def _compute(self, root: Node):
        cfg = self.config
        r = cfg.node_radius

        levels: List[List[Node]] = []

        def build_levels(node: Node, depth: int):
            if len(levels) <= depth:
                levels.append([])
            levels[depth].append(node)
            for child in node.children:
                build_levels(child, depth + 1)

        build_levels(root, 0)

        level_widths = [len(lvl) * (2 * r) + max(0, len(lvl) - 1) * cfg.sibling_hgap for lvl in levels]
        canvas_w = max(level_widths)
        y0 = r + cfg.margin

        # keyed by id(): nodes are not hashable by value and may repeat properties
        positions: Dict[int, Tuple[float, float]] = {}
        for depth, lvl in enumerate(levels):
            x = r + cfg.margin + (canvas_w - level_widths[depth]) / 2.0
            for node in lvl:
                positions[id(node)] = (x + r, y0 + depth * cfg.level_vgap)
                x += 2 * r + cfg.sibling_hgap

        self.width = canvas_w + 2 * (r + cfg.margin)
        self.height = y0 + len(levels) * cfg.level_vgap + r

        mainline = set()
        cur = root
        while cur is not None:
            mainline.add(id(cur))
            cur = cur.children[0] if cur.children else None

        def add_nodes(node: Node, is_variation: bool) -> int:
            x, y = positions[id(node)]
            idx = len(self.draw_nodes)
            self.draw_nodes.append(_DrawNode(node, x, y, r, is_variation, id(node) in mainline))
            for i, ch in enumerate(node.children):
                cidx = add_nodes(ch, is_variation or i > 0)
                self.edges.append((idx, cidx))
            return idx

        add_nodes(root, False)
        if DEBUG:
            print("[TreeRender] layout:", len(self.draw_nodes), "nodes,", len(levels), "levels")

    def hit_test(self, x: float, y: float) -> Optional[Node]:
        for dn in self.draw_nodes:
            dx = x - dn.x
            dy = y - dn.y
            if dx * dx + dy * dy <= (dn.radius + 2.0) ** 2:
                return dn.node
        return None


class TreeRenderer:
    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config if config is not None else RenderConfig()

    def _draw_diamond(self, cr: cairo.Context, cx: float, cy: float, size: float,
                      fill_color, stroke_color, stroke_width=1.0):
        cr.save()
        cr.translate(cx, cy)
        cr.rotate(math.pi / 4.0)
        side = size * math.sqrt(2)  # square side so that the diagonal is 2*size
        half = side / 2.0
        cr.new_path()
        cr.rectangle(-half, -half, side, side)
        cr.set_source_rgb(*fill_color)
        cr.fill_preserve()
        cr.set_line_width(stroke_width)
        cr.set_source_rgb(*stroke_color)
        cr.set_line_join(cairo.LINE_JOIN_ROUND)
        cr.set_line_cap(cairo.LINE_CAP_ROUND)
        cr.stroke()
        cr.restore()

    def draw(self, cr: cairo.Context, layout: TreeLayout, selected: Optional[Node] = None):
        cfg = self.config
        cr.set_source_rgb(*cfg.background)
        cr.paint()

        # the synthetic root alone means an empty collection
        if len(layout.draw_nodes) <= 1:
            cr.set_source_rgb(0.6, 0.6, 0.6)
            cr.select_font_face("Sans", cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_NORMAL)
            cr.set_font_size(cfg.font_size)
            cr.move_to(10, 20)
            cr.show_text("Tree is empty")
            return

        cr.set_line_width(1.0)
        for pidx, cidx in layout.edges:
            p = layout.draw_nodes[pidx]
            c = layout.draw_nodes[cidx]
            color = cfg.mainline_edge_color if p.on_mainline and c.on_mainline else cfg.edge_color
            cr.set_source_rgb(*color)
            cr.move_to(p.x, p.y + p.radius)
            cr.line_to(c.x, c.y - c.radius)
            cr.stroke()

        cr.new_path()
        for dn in layout.draw_nodes:
            is_selected = dn.node is selected
            if not dn.node.has_move():
                fill_col = (0.9, 0.95, 1.0) if is_selected else cfg.diamond_fill
                self._draw_diamond(cr, dn.x, dn.y, dn.radius, fill_col, cfg.diamond_stroke)
                if is_selected:
                    self._draw_diamond(cr, dn.x, dn.y, dn.radius + 2.0, fill_col, cfg.highlight_color,
                                       stroke_width=1.5)
                continue

            color = cfg.variation_color if dn.is_variation else cfg.move_color
            cr.set_source_rgb(*color)
            cr.arc(dn.x, dn.y, dn.radius, 0, 2 * math.pi)
            cr.fill()
            if is_selected:
                cr.set_line_width(1.5)
                cr.set_source_rgb(*cfg.highlight_color)
                cr.arc(dn.x, dn.y, dn.radius + 2.0, 0, 2 * math.pi)
                cr.stroke()

    def _surface_size(self, layout: TreeLayout) -> Tuple[int, int]:
        # room for the "Tree is empty" caption
        return max(int(math.ceil(layout.width)), 120), max(int(math.ceil(layout.height)), 32)

    def write_png(self, root: Node, path: str, selected: Optional[Node] = None) -> TreeLayout:
        layout = TreeLayout(root, self.config)
        width, height = self._surface_size(layout)
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
        cr = cairo.Context(surface)
        self.draw(cr, layout, selected)
        surface.write_to_png(path)
        if DEBUG:
            print("[TreeRender] wrote", path, width, "x", height)
        return layout

    def write_svg(self, root: Node, path: str, selected: Optional[Node] = None) -> TreeLayout:
        layout = TreeLayout(root, self.config)
        width, height = self._surface_size(layout)
        surface = cairo.SVGSurface(path, width, height)
        cr = cairo.Context(surface)
        self.draw(cr, layout, selected)
        surface.finish()
        if DEBUG:
            print("[TreeRender] wrote", path, width, "x", height)
        return layout


def write_png(root: Node, path: str, config: Optional[RenderConfig] = None) -> TreeLayout:
    return TreeRenderer(config).write_png(root, path)


def write_svg(root: Node, path: str, config: Optional[RenderConfig] = None) -> TreeLayout:
    return TreeRenderer(config).write_svg(root, path)
