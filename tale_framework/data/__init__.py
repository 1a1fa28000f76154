"""
Built-in game data.
"""
