"""Deterministic SVG image and JSON metadata for slug records

A record's picture is its slug, printed as a path ('/<slug>') on a solid
background. The colour is derived from the record's sequence id only, so two
renders of the same record are byte-identical.

Functions:
    font_size(length) -> int
    hue(sequence_id) -> int
    render_svg(record) -> str
    render(record) -> tuple[str, dict]
    token_uri(record) -> str

Example:
    >>> from slugregistry.models import SlugRecordModel
    >>> record = SlugRecordModel(slug='vanity', is_custom=True, sequence_id=1)
    >>> svg, metadata = render(record)
    >>> metadata['name']
    '/vanity'
    >>> token_uri(record).startswith('data:application/json;base64,')
    True
"""

import json
import base64
from typing import Any
from xml.sax.saxutils import escape

import xxhash

from slugregistry.models import SlugRecordModel


CANVAS_SIZE = 500
MAX_FONT_SIZE = 96
MIN_FONT_SIZE = 1
FULL_SIZE_MAX_LENGTH = 12  # slugs up to this length use MAX_FONT_SIZE
MIN_SIZE_LENGTH = 48  # slugs from this length on use MIN_FONT_SIZE
HUE_RANGE = 361
DESCRIPTION = 'A slug in the registry. The owner of this token controls where the slug points.'


def font_size(length: int) -> int:
    """Shrink the font linearly for long slugs

    Example:
        >>> font_size(8), font_size(20), font_size(60)
        (96, 56, 1)
    """
    if length <= FULL_SIZE_MAX_LENGTH:
        return MAX_FONT_SIZE
    if length >= MIN_SIZE_LENGTH:
        return MIN_FONT_SIZE
    return MAX_FONT_SIZE - 2 * length


def hue(sequence_id: int) -> int:
    """Derive a hue in [0, 360] from a sequence id"""
    return xxhash.xxh64_intdigest(str(sequence_id)) % HUE_RANGE


def render_svg(record: SlugRecordModel) -> str:
    color = hue(record.sequence_id)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CANVAS_SIZE}" height="{CANVAS_SIZE}" viewBox="0 0 {CANVAS_SIZE} {CANVAS_SIZE}">'
        f'<rect width="100%" height="100%" fill="hsl({color}, 100%, 90%)"/>'
        f'<text x="50%" y="50%" dominant-baseline="middle" text-anchor="middle" font-family="monospace" '
        f'font-size="{font_size(len(record.slug))}" fill="hsl({color}, 100%, 30%)">/{escape(record.slug)}</text>'
        '</svg>'
    )


def render(record: SlugRecordModel) -> tuple[str, dict[str, Any]]:
    """Render a record's SVG image and its JSON metadata

    Args:
        record (SlugRecordModel):
            Record to render.

    Returns:
        tuple[str, dict]:
            SVG document and metadata dictionary. The metadata embeds the SVG as
            a base64 data URI under 'image'.
    """
    svg = render_svg(record)
    image = 'data:image/svg+xml;base64,' + base64.b64encode(svg.encode('utf-8')).decode('ascii')
    metadata = {
        'name': f'/{record.slug}',
        'description': DESCRIPTION,
        'image': image,
        'attributes': [
            {'trait_type': 'Custom', 'value': record.is_custom},
            {'trait_type': 'Length', 'value': len(record.slug)},
        ],
    }
    return svg, metadata


def token_uri(record: SlugRecordModel) -> str:
    """Return a record's metadata as a base64 JSON data URI"""
    _, metadata = render(record)
    payload = json.dumps(metadata, ensure_ascii=False).encode('utf-8')
    return 'data:application/json;base64,' + base64.b64encode(payload).decode('ascii')
