"""Procedural dungeon level generation for a grid-based roguelike."""
