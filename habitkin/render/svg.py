"""Minimal SVG element builder over xml.etree.ElementTree.

Fragments are built as element trees and serialized once, so attribute values
are always escaped and nesting is always well formed.
"""
import xml.etree.ElementTree as ET

SVG_NS = "http://www.w3.org/2000/svg"


def fmt(value) -> str:
    """Compact number formatting: at most two decimals, no trailing zeros."""
    if isinstance(value, str):
        return value
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def el(tag: str, attrs: dict | None = None, *children) -> ET.Element:
    """Create an element; attribute values are formatted, None values skipped."""
    node = ET.Element(tag, {k: fmt(v) for k, v in (attrs or {}).items() if v is not None})
    for child in children:
        if child is not None:
            node.append(child)
    return node


def group(group_id: str | None, *children, **attrs) -> ET.Element:
    """<g> with optional id; keyword attrs use underscores for dashes."""
    merged = {"id": group_id}
    merged.update({k.replace("_", "-"): v for k, v in attrs.items()})
    return el("g", merged, *children)


def _shape(tag: str, attrs: dict) -> ET.Element:
    return el(tag, {k.replace("_", "-"): v for k, v in attrs.items()})


def path(d: str, **attrs) -> ET.Element:
    return _shape("path", {"d": " ".join(d.split()), **attrs})


def circle(cx, cy, r, **attrs) -> ET.Element:
    return _shape("circle", {"cx": cx, "cy": cy, "r": r, **attrs})


def ellipse(cx, cy, rx, ry, **attrs) -> ET.Element:
    return _shape("ellipse", {"cx": cx, "cy": cy, "rx": rx, "ry": ry, **attrs})


def rect(x, y, width, height, **attrs) -> ET.Element:
    return _shape("rect", {"x": x, "y": y, "width": width, "height": height, **attrs})


def translate(dx: float, dy: float) -> str | None:
    """Transform attribute value, or None when there is nothing to move."""
    if dx == 0 and dy == 0:
        return None
    return f"translate({fmt(dx)} {fmt(dy)})"


def serialize(node: ET.Element | None) -> str:
    """Serialize an element (or nothing) to markup."""
    if node is None:
        return ""
    return ET.tostring(node, encoding="unicode", short_empty_elements=True)
