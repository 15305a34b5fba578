"""Shared builders for store tests."""


def make_state(**overrides) -> dict:
    """A small but complete flat state as the UI would hand to save_state."""
    state = {
        "engineerLevel": 12,
        "scarabLevel": 3,
        "riftRank": "gold",
        "machines": [
            {
                "id": 1, "rarity": "Epic", "level": 10,
                "blueprints": {"damage": 4, "health": 2, "armor": 1},
                "inscriptionLevel": 2, "sacredLevel": 0,
            },
            {
                "id": "cannon", "rarity": "Rare", "level": 5,
                "blueprints": {"damage": 0, "health": 0, "armor": 0},
            },
        ],
        "heroes": [
            {"id": "h1", "percentages": {"damage": 5, "health": 0, "armor": 0}},
        ],
        "artifacts": {"damage": {30: 2, 45: 1}},
    }
    state.update(overrides)
    return state
