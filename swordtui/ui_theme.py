"""UI theme definitions and selection helpers.

Themes are 24-bit ANSI palettes keyed by a short slug. ``plain`` carries no
escape codes at all and backs ``--no-color``.
"""

from __future__ import annotations

from dataclasses import dataclass


def _fg(hex_color: str, *, bold: bool = False) -> str:
    red, green, blue = (int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
    prefix = "1;" if bold else ""
    return f"\033[{prefix}38;2;{red};{green};{blue}m"


def _bg(hex_color: str) -> str:
    red, green, blue = (int(hex_color[i : i + 2], 16) for i in (1, 3, 5))
    return f"\033[48;2;{red};{green};{blue}m"


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    title: str
    primary: str
    secondary: str
    accent: str
    muted: str
    error: str
    success: str
    warning: str
    border: str
    border_active: str
    highlight: str
    reset: str = "\033[0m"
    bold: str = "\033[1m"
    dim: str = "\033[2m"
    reverse: str = "\033[7m"


def _palette(
    name: str,
    title: str,
    *,
    primary: str,
    secondary: str,
    accent: str,
    muted: str,
    error: str,
    success: str,
    warning: str,
    border: str,
    border_active: str,
    highlight: str,
) -> UITheme:
    return UITheme(
        name=name,
        title=title,
        primary=_fg(primary),
        secondary=_fg(secondary),
        accent=_fg(accent, bold=True),
        muted=_fg(muted),
        error=_fg(error, bold=True),
        success=_fg(success),
        warning=_fg(warning, bold=True),
        border=_fg(border),
        border_active=_fg(border_active),
        highlight=_bg(highlight),
    )


CATPPUCCIN_MOCHA = _palette(
    "catppuccin-mocha",
    "Catppuccin Mocha",
    primary="#cdd6f4",
    secondary="#a6adc8",
    accent="#f5c2e7",
    muted="#6c7086",
    error="#f38ba8",
    success="#a6e3a1",
    warning="#f9e2af",
    border="#45475a",
    border_active="#89b4fa",
    highlight="#45475a",
)

CATPPUCCIN_LATTE = _palette(
    "catppuccin-latte",
    "Catppuccin Latte",
    primary="#4c4f69",
    secondary="#5c5f77",
    accent="#ea76cb",
    muted="#9ca0b0",
    error="#d20f39",
    success="#40a02b",
    warning="#df8e1d",
    border="#dce0e8",
    border_active="#1e66f5",
    highlight="#ccd0da",
)

DRACULA = _palette(
    "dracula",
    "Dracula",
    primary="#f8f8f2",
    secondary="#6272a4",
    accent="#ff79c6",
    muted="#6272a4",
    error="#ff5555",
    success="#50fa7b",
    warning="#f1fa8c",
    border="#44475a",
    border_active="#bd93f9",
    highlight="#44475a",
)

ROSE_PINE_MOON = _palette(
    "rose-pine-moon",
    "Rosé Pine Moon",
    primary="#e0def4",
    secondary="#908caa",
    accent="#ebbcba",
    muted="#6e6a86",
    error="#eb6f92",
    success="#9ccfd8",
    warning="#f6c177",
    border="#403d52",
    border_active="#c4a7e7",
    highlight="#393552",
)

ROSE_PINE_DAWN = _palette(
    "rose-pine-dawn",
    "Rosé Pine Dawn",
    primary="#575279",
    secondary="#797593",
    accent="#d7827e",
    muted="#9893a5",
    error="#b4637a",
    success="#56949f",
    warning="#ea9d34",
    border="#f2e9e1",
    border_active="#907aa9",
    highlight="#f2e9e1",
)

SOLARIZED_DARK = _palette(
    "solarized-dark",
    "Solarized Dark",
    primary="#839496",
    secondary="#586e75",
    accent="#d33682",
    muted="#586e75",
    error="#dc322f",
    success="#859900",
    warning="#b58900",
    border="#073642",
    border_active="#268bd2",
    highlight="#073642",
)

SOLARIZED_LIGHT = _palette(
    "solarized-light",
    "Solarized Light",
    primary="#657b83",
    secondary="#93a1a1",
    accent="#d33682",
    muted="#93a1a1",
    error="#dc322f",
    success="#859900",
    warning="#b58900",
    border="#eee8d5",
    border_active="#268bd2",
    highlight="#eee8d5",
)

PLAIN_THEME = UITheme(
    name="plain",
    title="Plain",
    primary="",
    secondary="",
    accent="",
    muted="",
    error="",
    success="",
    warning="",
    border="",
    border_active="",
    highlight="",
    reset="",
    bold="",
    dim="",
    reverse="",
)

DEFAULT_THEME = CATPPUCCIN_MOCHA

_THEMES: dict[str, UITheme] = {
    theme.name: theme
    for theme in (
        CATPPUCCIN_MOCHA,
        CATPPUCCIN_LATTE,
        DRACULA,
        ROSE_PINE_MOON,
        ROSE_PINE_DAWN,
        SOLARIZED_DARK,
        SOLARIZED_LIGHT,
    )
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names in menu order."""
    return tuple(_THEMES.keys())


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default.

    Display titles such as ``"Rosé Pine Moon"`` are accepted too.
    """
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if not candidate:
        return DEFAULT_THEME.name
    if candidate in _THEMES:
        return candidate
    for theme in _THEMES.values():
        if theme.title.lower() == candidate:
            return theme.name
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
