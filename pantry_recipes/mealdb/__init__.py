"""
TheMealDB integration.

Responsibilities:
- Query TheMealDB by name, by category or for random meals.
- Turn meals into recipes with ingredient lists and inferred dietary tags.
- Store imported meals, skipping ones already present under the same source URL.
"""
