"""
Built-in catalog data.

Same shape as the JSON files a data directory holds under
database/<category>/, so both go through the same schema checks.
"""

ITEMS = [
    {
        "id": "small_potion",
        "name": "Small Potion",
        "description": "Restores 30 HP.",
        "type": "consumable",
        "effects": {"hp": 30},
        "sellPrice": 5,
    },
    {
        "id": "mana_potion",
        "name": "Mana Potion",
        "description": "Restores 20 MP.",
        "type": "consumable",
        "effects": {"mp": 20},
        "sellPrice": 8,
    },
    {
        "id": "large_potion",
        "name": "Large Potion",
        "description": "Restores 80 HP.",
        "type": "consumable",
        "effects": {"hp": 80},
        "sellPrice": 20,
    },
    {
        "id": "fire_bomb",
        "name": "Fire Bomb",
        "description": "Thrown at an enemy for 25 damage.",
        "type": "consumable",
        "effects": {"attack": 25},
        "sellPrice": 12,
    },
    {
        "id": "basic_sword",
        "name": "Basic Sword",
        "description": "A plain but reliable blade.",
        "type": "weapon",
        "equipSlot": "weapon",
        "effects": {"attack": 5},
        "sellPrice": 10,
    },
    {
        "id": "iron_sword",
        "name": "Iron Sword",
        "description": "Heavier and sharper.",
        "type": "weapon",
        "equipSlot": "weapon",
        "effects": {"attack": 10},
        "sellPrice": 40,
    },
    {
        "id": "leather_armor",
        "name": "Leather Armor",
        "description": "Light protection.",
        "type": "armor",
        "equipSlot": "armor",
        "effects": {"defense": 5, "hp": 10},
        "sellPrice": 15,
    },
    {
        "id": "chain_mail",
        "name": "Chain Mail",
        "description": "Interlocking rings of steel.",
        "type": "armor",
        "equipSlot": "armor",
        "effects": {"defense": 10},
        "sellPrice": 50,
    },
    {
        "id": "lucky_charm",
        "name": "Lucky Charm",
        "description": "Feels warm to the touch.",
        "type": "accessory",
        "equipSlot": "accessory",
        "effects": {"luck": 5, "speed": 2},
        "sellPrice": 30,
    },
    {
        "id": "old_map",
        "name": "Old Map",
        "description": "A faded map of the region.",
        "type": "keyItem",
    },
    {
        "id": "rusty_key",
        "name": "Rusty Key",
        "description": "Opens something, somewhere.",
        "type": "keyItem",
    },
]

SKILLS = [
    {
        "id": "power_strike",
        "name": "Power Strike",
        "description": "A heavy blow against one enemy.",
        "mpCost": 5,
        "effectType": "damage_hp",
        "effectValue": 10,
        "targetType": "enemy_single",
    },
    {
        "id": "whirlwind",
        "name": "Whirlwind",
        "description": "Strikes every enemy.",
        "mpCost": 12,
        "effectType": "damage_hp",
        "effectValue": 6,
        "targetType": "enemy_all",
    },
    {
        "id": "heal",
        "name": "Heal",
        "description": "Restores 40 HP.",
        "mpCost": 8,
        "effectType": "heal_hp",
        "effectValue": 40,
        "targetType": "self",
    },
    {
        "id": "focus",
        "name": "Focus",
        "description": "Recovers 15 MP.",
        "mpCost": 0,
        "effectType": "heal_mp",
        "effectValue": 15,
        "targetType": "self",
    },
    {
        "id": "iron_skin",
        "name": "Iron Skin",
        "description": "Hardens the body for a few turns.",
        "mpCost": 6,
        "effectType": "buff_defense",
        "effectValue": 5,
        "effectTurns": 3,
        "targetType": "self",
    },
]

SHOPS = [
    {
        "id": "default",
        "itemIds": ["small_potion", "mana_potion", "leather_armor", "iron_sword"],
    },
]

PROGRESSION = [
    {
        "id": "player",
        "defaultSkills": ["power_strike", "heal"],
        "skillsByLevel": {
            "2": ["whirlwind"],
            "3": ["focus"],
            "5": ["iron_skin"],
        },
    },
]

DEFAULT_SHOP_ID = "default"
