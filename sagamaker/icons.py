"""Built-in icon palette for skill nodes."""

from typing import Optional, Tuple

DEFAULT_ICON = "⭐"

# Grouped loosely by theme; the properties panel lays them out six per row.
ICONS: Tuple[str, ...] = (
    "⚔️", "🛡️", "🏃", "💪", "🧠", "📚",
    "🎨", "🎭", "🎮", "🎲", "🎯", "🎪",
    "🧘", "🏋️", "🤸", "🎼", "🎸", "🎺",
    "🎻", "🎹", "🎤", "📷", "🎥", "💻",
    "📱", "🔧", "⚡", "💡",
)


def get_all_icons() -> Tuple[str, ...]:
    """Get every icon in palette order."""
    return ICONS


def display_icon(icon: Optional[str]) -> str:
    """Icon to draw for a node, falling back to the default glyph."""
    return icon or DEFAULT_ICON
