from __future__ import annotations
import re
from typing import Dict

from .schemas import AppSettings

ACCENT_COLORS = {
    'Indigo': '#6366F1',
    'Emerald': '#10B981',
    'Rose': '#F43F5E',
    'Amber': '#F59E0B',
}

DENSITY_LABELS = {
    '14px': 'Ultra',
    '15px': 'Compact',
    '16px': 'Default',
}

DEFAULT_ACCENT_RGB = '99, 102, 241'

_HEX_RE = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)

def hex_to_rgb(hex_color: str) -> str:
    """'#6366F1' -> '99, 102, 241'; anything unparseable gives the indigo default."""
    match = _HEX_RE.match(hex_color or '')
    if not match:
        return DEFAULT_ACCENT_RGB
    return ', '.join(str(int(part, 16)) for part in match.groups())

def theme_variables(settings: AppSettings) -> Dict[str, str]:
    accent = settings.accentColor or ACCENT_COLORS['Indigo']
    return {
        '--p-accent': accent,
        '--p-accent-rgb': hex_to_rgb(accent),
        'font-size': settings.uiDensity,
        'color-scheme': settings.theme,
    }
