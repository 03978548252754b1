"""
Recipe suggestion engine.

Responsibilities:
- Count how many of a recipe's ingredients are already in the user's pantry.
- Drop recipes that break the user's dietary preferences or allergies.
- Rank the survivors by match ratio, liked recipes and dietary-tag affinity.
"""
