"""Rift Teams: balanced custom-game team maker."""
