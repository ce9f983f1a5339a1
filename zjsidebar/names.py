"""Deterministic decorative tab names: ``<emoji> <adjective> <noun>``.

Names derive from the session name and the tab position only, so every
sidebar instance in a session picks the same name for the same tab.
"""

from typing import Dict

MASK64 = (1 << 64) - 1

EMOJIS = [
    "🌟", "🚀", "🎨", "🌈", "⚡", "🔥", "❄️", "🌸", "🍀", "🦄",
    "🐉", "🦋", "🐢", "🦊", "🐙", "🦜", "🌺", "🍄", "🌙", "☀️",
    "💎", "🏔️", "🌊", "🍃", "🎭", "🎪", "🎯", "🎲", "🔮", "💫",
    "🎸", "🎹", "🎺", "🎷", "🥁", "🎵", "🎶", "🎼", "🎤", "🎧",
    "📚", "📖", "💡", "🔍", "🔬", "🔭", "🔧", "⚙️", "🗝️", "🛡️",
    "🌱", "🌿", "🍁", "🍂", "🌾", "🌵", "🌴", "🌲", "🌳", "🌷",
    "🏖️", "🏝️", "🏜️", "🏞️", "🗻", "🌋", "🏛️", "🏰", "🗼", "🌉",
    "🦁", "🐯", "🐨", "🐼", "🦘", "🦓", "🦒", "🦌", "🦚", "🦩",
    "🍎", "🍊", "🍋", "🍓", "🍇", "🍉", "🥝", "🍑", "🍒", "🥭",
    "⭐", "✨", "🌠", "☄️", "🌌", "🪐", "🛸", "🚁", "✈️", "🛩️",
]

ADJECTIVES = [
    "happy", "bright", "swift", "gentle", "mighty", "clever", "brave", "calm",
    "eager", "jolly", "keen", "lively", "merry", "proud", "quirky", "radiant",
    "serene", "vivid", "witty", "zesty", "cosmic", "mystic", "noble", "ornate",
    "plucky", "rustic", "sleek", "unique", "valiant", "whimsical", "agile", "bold",
    "crisp", "daring", "elegant", "fierce", "graceful", "humble", "intense", "jovial",
    "kindly", "luminous", "majestic", "nimble", "peaceful", "quick", "royal", "spirited",
    "tranquil", "upbeat", "vibrant", "wise", "zealous", "artistic", "bouncy", "charming",
    "dreamy", "ethereal", "friendly", "gleaming", "heroic", "inspired", "joyful", "kinetic",
]

NOUNS = [
    "fox", "star", "moon", "wave", "flame", "storm", "cloud", "river",
    "mountain", "forest", "ocean", "desert", "meadow", "canyon", "glacier", "aurora",
    "comet", "nebula", "phoenix", "dragon", "falcon", "leopard", "dolphin", "butterfly",
    "crystal", "prism", "beacon", "horizon", "cascade", "zenith", "adventure", "breeze",
    "cosmos", "dream", "echo", "fountain", "garden", "harmony", "island", "journey",
    "kaleidoscope", "lighthouse", "melody", "nova", "oasis", "paradise", "quest", "rainbow",
    "sanctuary", "twilight", "universe", "valley", "whisper", "zephyr", "arbor", "bloom",
    "citadel", "dawn", "ember", "frost", "glow", "haven", "iris", "jewel",
]


def simple_hash(seed: int) -> int:
    """64-bit mixing function; deterministic across processes."""
    x = seed & MASK64
    x = ((x ^ (x >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    x = ((x ^ (x >> 27)) * 0x94D049BB133111EB) & MASK64
    return x ^ (x >> 31)


def session_seed(session_name: str) -> int:
    seed = 0
    for i, byte in enumerate(session_name.encode()):
        seed = (seed + byte * (i + 1)) & MASK64
        seed = simple_hash(seed)
    return seed


def generate_tab_name(tab_position: int, seed: int) -> str:
    # Emoji cycles with the position so neighbouring tabs never share one
    emoji = EMOJIS[tab_position % len(EMOJIS)]
    mixed = simple_hash((seed + tab_position) & MASK64)
    adjective = ADJECTIVES[simple_hash(mixed) % len(ADJECTIVES)]
    noun = NOUNS[simple_hash(simple_hash(mixed)) % len(NOUNS)]
    return f"{emoji} {adjective} {noun}"


class NameCache:
    """Per-session cache of generated names."""

    def __init__(self, session_name: str = ""):
        self._names: Dict[int, str] = {}
        self.seed = session_seed(session_name) if session_name else 0

    def set_session(self, session_name: str) -> None:
        seed = session_seed(session_name)
        if seed != self.seed:
            self.seed = seed
            self._names.clear()

    def get_or_generate(self, tab_position: int) -> str:
        if tab_position not in self._names:
            self._names[tab_position] = generate_tab_name(tab_position, self.seed)
        return self._names[tab_position]
