from datetime import date
from typing import List

from app.schemas.product import ProductCreate

# Demo rows offered by the dashboard's bulk import screen
SAMPLE_PRODUCTS = [
    {"id": "P001", "name": "Apple", "category": "Fruits", "price": 100.0, "quantity": 50,
     "expiry_date": date(2026, 3, 1), "discount": 10.0},
    {"id": "P002", "name": "Banana", "category": "Fruits", "price": 50.0, "quantity": 100,
     "expiry_date": date(2026, 2, 25), "discount": 5.0},
    {"id": "P003", "name": "Milk", "category": "Dairy", "price": 80.0, "quantity": 30,
     "expiry_date": date(2026, 2, 24), "discount": 0.0},
    {"id": "P004", "name": "Cheese", "category": "Dairy", "price": 250.0, "quantity": 20,
     "expiry_date": date(2026, 4, 10), "discount": 15.0},
    {"id": "P005", "name": "Shampoo", "category": "Personal Care", "price": 300.0, "quantity": 60,
     "expiry_date": None, "discount": 20.0},
    {"id": "P006", "name": "Rice", "category": "Grains", "price": 120.0, "quantity": 200,
     "expiry_date": date(2027, 1, 1), "discount": 0.0},
]


def sample_products() -> List[ProductCreate]:
    return [ProductCreate(**row) for row in SAMPLE_PRODUCTS]
