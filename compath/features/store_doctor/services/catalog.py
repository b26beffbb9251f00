from typing import Iterable, List

# Tags that pin down what kind of game it is. Matched as case-insensitive substrings.
SPECIFIC_TAGS = [
    "Roguelike", "Roguelite", "Metroidvania", "Souls-like", "Hack and Slash",
    "Turn-Based", "Real-Time", "Tower Defense", "Bullet Hell", "Survival",
    "Open World", "Linear", "Story Rich", "Atmospheric", "Horror",
    "Puzzle", "Platformer", "Fighting", "Racing", "Sports",
    "City Builder", "Management", "Simulation", "Strategy", "Tactical",
    "Visual Novel", "Dating Sim", "JRPG", "Action RPG", "Dungeon Crawler",
    "Stealth", "Shooter", "FPS", "Third Person", "Top-Down",
    "Side Scroller", "Pixel Graphics", "2D", "3D", "Retro",
    "Cyberpunk", "Fantasy", "Sci-fi", "Post-apocalyptic", "Medieval",
]

# Tags so common they say almost nothing in the top slots. Matched by exact name.
BROAD_TAGS = [
    "Indie", "Singleplayer", "Action", "Adventure", "Casual",
    "Free to Play", "Early Access", "Great Soundtrack", "Controller",
    "Full controller support", "Steam Achievements",
]

_BROAD_LOOKUP = {tag.lower() for tag in BROAD_TAGS}


def is_broad_tag(tag: str) -> bool:
    return tag.strip().lower() in _BROAD_LOOKUP


def is_specific_tag(tag: str) -> bool:
    lowered = tag.lower()
    return any(specific.lower() in lowered for specific in SPECIFIC_TAGS)


def broad_tags_in(tags: Iterable[str]) -> List[str]:
    return [tag for tag in tags if is_broad_tag(tag)]
