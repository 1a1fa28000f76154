"""
Tale Framework - game systems for script-driven RPG sessions.

Modules:
- content: Script, stage, scene and character models, script loading
- progression: Player sheet, derived stats, leveling, skills
- inventory: Item stacks and equipment
- shop: Catalog resolution, buying and selling
- battle: Turn-based combat and auto-battle
- world: Scene navigation
- save: Session persistence
- session: State, reducer and the public GameSession
"""

__version__ = "0.1.0"
