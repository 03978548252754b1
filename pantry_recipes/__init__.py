"""
Pantry Recipes API.

Suggests recipes from a recipe graph based on the ingredients a user has in
their pantry, filtered by dietary preferences and allergies.
"""
