"""
Category tables for Kometa Images.

Each category describes one family of default posters: the font and text box
shared by every poster in it, the permitted point size range, and one
background colour per item. Display text for an item comes from the
translation file (collections.<category>.<item>).
"""

from typing import Any, Dict, List

from .errors import KometaImagesError

DEFAULT_FONT = 'Comfortaa-Medium'
DEFAULT_FILL = '#FFFFFF'

CATEGORIES: Dict[str, Dict[str, Any]] = {
    'award': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (100, 250),
        'fill': DEFAULT_FILL,
        'items': {
            'bafta': '#9C7C38',
            'berlinale': '#BB0B34',
            'cannes': '#AF8F51',
            'cesar': '#E2A845',
            'choice': '#AC7427',
            'emmy': '#D89C27',
            'golden_globe': '#A86903',
            'oscars': '#A9842E',
            'razzie': '#FF0C0C',
            'spirit': '#4662E7',
            'sundance': '#7EB2CF',
            'venice': '#D21635',
        },
    },
    'decade': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (250, 500),
        'fill': DEFAULT_FILL,
        'items': {
            '1920s': '#8A5A2B',
            '1930s': '#7D6E3B',
            '1940s': '#4F6B3A',
            '1950s': '#2E7D6B',
            '1960s': '#2B6A8A',
            '1970s': '#3B4C8A',
            '1980s': '#6B3A8A',
            '1990s': '#8A2B6A',
            '2000s': '#8A2B3B',
            '2010s': '#8A4A2B',
            '2020s': '#5C6B2B',
        },
    },
    'genre': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (120, 250),
        'fill': DEFAULT_FILL,
        'items': {
            'action': '#387DBF',
            'adventure': '#40B997',
            'animation': '#9035BE',
            'comedy': '#B7363E',
            'crime': '#888888',
            'documentary': '#2C4FA8',
            'drama': '#BB2D82',
            'family': '#BABA6C',
            'fantasy': '#CC2BC6',
            'horror': '#B9363E',
            'mystery': '#867CB5',
            'romance': '#B932B9',
            'science_fiction': '#545FBA',
            'thriller': '#C3602B',
            'war': '#B98C47',
            'western': '#B98B50',
        },
    },
    'language': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (100, 250),
        'fill': DEFAULT_FILL,
        'items': {
            'ar': '#37D9A3',
            'de': '#97FDAE',
            'en': '#DD4A8B',
            'es': '#7649E4',
            'fr': '#4CF3B9',
            'hi': '#AA2C16',
            'it': '#D14E7C',
            'ja': '#4FCF54',
            'ko': '#127FB8',
            'pt': '#AE4932',
            'ru': '#97D820',
            'zh': '#40D72E',
        },
    },
    'network': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (100, 250),
        'fill': DEFAULT_FILL,
        'items': {
            'abc': '#403FCE',
            'amc': '#4A8C48',
            'bbc': '#A24049',
            'cbs': '#2926C0',
            'fox': '#474EAB',
            'hbo': '#458EAD',
            'nbc': '#703AAC',
            'showtime': '#3EB3AC',
        },
    },
    'resolution': {
        'font': DEFAULT_FONT,
        'box': (1600, 800),
        'point_sizes': (200, 500),
        'fill': DEFAULT_FILL,
        'items': {
            '4k': '#8A46CF',
            '1080p': '#A6C7F2',
            '720p': '#36A1D0',
            '576p': '#7D8A2E',
            '480p': '#95A9D6',
            'sd': '#B33A3A',
        },
    },
    'seasonal': {
        'font': DEFAULT_FONT,
        'box': (1800, 1000),
        'point_sizes': (100, 250),
        'fill': DEFAULT_FILL,
        'items': {
            'christmas': '#D52414',
            'easter': '#46D69D',
            'halloween': '#DA8B25',
            'independence': '#2931CB',
            'thanksgiving': '#A1642F',
            'valentine': '#D12AAE',
        },
    },
}


def get_category(name: str) -> Dict[str, Any]:
    """Return the table for a category."""
    try:
        return CATEGORIES[name]
    except KeyError:
        raise KometaImagesError(
            f"Unknown category {name!r}; choose from {', '.join(sorted(CATEGORIES))}"
        ) from None


def category_names() -> List[str]:
    return sorted(CATEGORIES)


def category_fonts(names: List[str]) -> List[str]:
    """Fonts used by the given categories."""
    return sorted({get_category(name)['font'] for name in names})
