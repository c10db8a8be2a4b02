# catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


PRODUCTS = {
    10: {"id": 10, "name": "Burger", "price": 5.00, "image": "/uploads/burger.png", "category_id": 1, "category_name": "Mains"},
    11: {"id": 11, "name": "Pizza", "price": 8.50, "image": "/uploads/pizza.png", "category_id": 1, "category_name": "Mains"},
    12: {"id": 12, "name": "Lemonade", "price": 2.25, "image": None, "category_id": 2, "category_name": "Drinks"},
}


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
