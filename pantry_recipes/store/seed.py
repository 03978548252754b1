"""Sample ingredients and recipes written into an empty graph."""
from __future__ import annotations

SEED_INGREDIENTS: list[tuple[str, str]] = [
    ("Tomato", "Vegetable"),
    ("Onion", "Vegetable"),
    ("Garlic", "Vegetable"),
    ("Olive Oil", "Oil"),
    ("Salt", "Seasoning"),
    ("Pepper", "Seasoning"),
    ("Chicken", "Protein"),
    ("Rice", "Grain"),
    ("Pasta", "Grain"),
    ("Cheese", "Dairy"),
    ("Milk", "Dairy"),
    ("Eggs", "Protein"),
    ("Flour", "Grain"),
    ("Quinoa", "Grain"),
    ("Spinach", "Vegetable"),
    ("Broccoli", "Vegetable"),
    ("Carrot", "Vegetable"),
    ("Bell Pepper", "Vegetable"),
    ("Mushroom", "Vegetable"),
    ("Avocado", "Fruit"),
    ("Bread", "Grain"),
]

# "uses" entries are (ingredient name, amount, unit)
SEED_RECIPES: list[dict] = [
    {
        "id": "recipe-1",
        "name": "Simple Tomato Pasta",
        "description": "A quick and healthy pasta dish with fresh tomatoes",
        "prep_time": 10,
        "cook_time": 20,
        "servings": 4,
        "difficulty": "Easy",
        "dietary_tags": ["vegetarian"],
        "uses": [
            ("Pasta", "400g", "grams"),
            ("Tomato", "4", "pieces"),
            ("Garlic", "2", "cloves"),
            ("Olive Oil", "2", "tbsp"),
            ("Salt", "1", "tsp"),
            ("Pepper", "1/2", "tsp"),
        ],
    },
    {
        "id": "recipe-2",
        "name": "Quinoa Salad Bowl",
        "description": "Nutritious quinoa salad with fresh vegetables",
        "prep_time": 15,
        "cook_time": 20,
        "servings": 2,
        "difficulty": "Easy",
        "dietary_tags": ["vegetarian", "vegan", "gluten-free"],
        "uses": [
            ("Quinoa", "1", "cup"),
            ("Spinach", "2", "cups"),
            ("Tomato", "2", "pieces"),
            ("Avocado", "1", "piece"),
        ],
    },
    {
        "id": "recipe-3",
        "name": "Chicken Stir Fry",
        "description": "Healthy chicken stir fry with vegetables",
        "prep_time": 15,
        "cook_time": 15,
        "servings": 4,
        "difficulty": "Medium",
        "dietary_tags": ["gluten-free"],
        "uses": [
            ("Chicken", "500g", "grams"),
            ("Broccoli", "2", "cups"),
            ("Bell Pepper", "2", "pieces"),
            ("Salt", "1", "tsp"),
            ("Pepper", "1/2", "tsp"),
        ],
    },
    {
        "id": "recipe-4",
        "name": "Avocado Toast",
        "description": "Simple and healthy avocado toast",
        "prep_time": 5,
        "cook_time": 5,
        "servings": 1,
        "difficulty": "Easy",
        "dietary_tags": ["vegetarian", "vegan"],
        "uses": [
            ("Avocado", "1", "piece"),
            ("Bread", "2", "slices"),
        ],
    },
]
