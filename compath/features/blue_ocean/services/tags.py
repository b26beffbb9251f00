POPULAR_TAGS = {
    "genres": [
        "Action", "Adventure", "RPG", "Strategy", "Simulation", "Sports", "Racing",
        "Puzzle", "Casual", "Indie", "FPS", "Platformer", "Horror", "Survival",
        "Fighting", "Shooter", "Visual Novel", "JRPG", "Turn-Based", "Real-Time",
    ],
    "subgenres": [
        "Roguelike", "Roguelite", "Metroidvania", "Souls-like", "Bullet Hell",
        "Tower Defense", "City Builder", "Management", "Dungeon Crawler", "Deck Building",
        "Auto Battler", "Battle Royale", "Open World", "Sandbox", "Crafting",
        "Base Building", "Colony Sim", "Life Sim",
    ],
    "themes": [
        "Fantasy", "Sci-fi", "Cyberpunk", "Post-apocalyptic", "Medieval", "Horror",
        "Comedy", "Dark", "Cute", "Anime", "Pixel Graphics", "Retro", "Zombies",
        "Vampires", "Dragons", "Space", "Military",
    ],
    "features": [
        "Singleplayer", "Multiplayer", "Co-op", "PvP", "Online Co-Op", "Local Co-Op",
        "Controller", "VR", "Early Access", "Free to Play",
    ],
}
