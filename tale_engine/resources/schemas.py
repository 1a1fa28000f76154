"""
JSON schemas for authored data.

Documents are checked against these before they are parsed into
models, so authoring mistakes surface as one readable message instead
of a stack of model errors.
"""

SCRIPT_SCHEMA = {
    "type": "object",
    "required": ["worldSettings", "stages"],
    "properties": {
        "worldSettings": {
            "type": "object",
            "required": ["title"],
            "properties": {
                "title": {"type": "string"},
                "description": {"type": "string"},
                "mainConflict": {"type": ["string", "null"]},
                "keyLocations": {"type": ["string", "null"]},
            },
        },
        "stages": {
            "type": "array",
            "items": {"$ref": "#/definitions/stage"},
        },
    },
    "definitions": {
        "stage": {
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "string"},
                "characters": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/character"},
                },
                "scenes": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/scene"},
                },
            },
        },
        "character": {
            "type": "object",
            "required": ["id", "name", "type"],
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "type": {"type": "string"},
                "hp": {"type": ["integer", "null"]},
                "attack": {"type": ["integer", "null"]},
                "defense": {"type": ["integer", "null"]},
            },
        },
        "scene": {
            "type": "object",
            "required": ["id", "type"],
            "properties": {
                "id": {"type": "string"},
                "type": {"type": "string"},
                "content": {"type": "string"},
                "characterIds": {"type": ["array", "null"], "items": {"type": "string"}},
                "nextSceneId": {"type": ["string", "null"]},
                "newLocationName": {"type": ["string", "null"]},
                "item": {"type": ["string", "null"]},
                "combatDetails": {
                    "type": ["object", "null"],
                    "properties": {
                        "enemyCharacterIds": {
                            "type": "array",
                            "items": {"type": "string"},
                        },
                    },
                },
                "choices": {
                    "type": ["array", "null"],
                    "items": {
                        "type": "object",
                        "required": ["id", "text", "nextSceneId"],
                    },
                },
            },
        },
    },
}

ITEM_SCHEMA = {
    "type": "object",
    "required": ["id", "name", "type"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "type": {
            "enum": ["consumable", "weapon", "armor", "accessory", "keyItem"],
        },
        "effects": {
            "type": "object",
            "additionalProperties": {"type": "integer"},
        },
        "equipSlot": {"enum": ["weapon", "armor", "accessory"]},
        "sellPrice": {"type": "integer", "minimum": 0},
    },
}

SKILL_SCHEMA = {
    "type": "object",
    "required": ["id", "name", "effectType", "targetType"],
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "mpCost": {"type": "integer", "minimum": 0},
        "effectValue": {"type": "integer"},
        "effectTurns": {"type": "integer", "minimum": 0},
        "effectType": {
            "enum": [
                "damage_hp", "heal_hp", "damage_mp", "heal_mp",
                "buff_attack", "debuff_attack", "buff_defense",
                "debuff_defense", "etc",
            ],
        },
        "targetType": {
            "enum": ["enemy_single", "enemy_all", "self", "ally_single", "none"],
        },
    },
}

SHOP_SCHEMA = {
    "type": "object",
    "required": ["id", "itemIds"],
    "properties": {
        "id": {"type": "string"},
        "itemIds": {"type": "array", "items": {"type": "string"}},
    },
}

PROGRESSION_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string"},
        "defaultSkills": {"type": "array", "items": {"type": "string"}},
        "skillsByLevel": {
            "type": "object",
            "patternProperties": {
                "^[0-9]+$": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": False,
        },
    },
}

# category folder -> schema
CATALOG_SCHEMAS = {
    "items": ITEM_SCHEMA,
    "skills": SKILL_SCHEMA,
    "shops": SHOP_SCHEMA,
    "progression": PROGRESSION_SCHEMA,
}
