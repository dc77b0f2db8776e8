# product_service/main.py
# lokalny zamiennik katalogu produktow (docker-compose / dev), rdzen tylko czyta
from fastapi import FastAPI, HTTPException, Query

app = FastAPI(title="Product Service (dev mock)")


CATALOG = [
    {"id": 1, "name": "Cimento 50kg", "price": 38.90, "stock": 120, "store_id": 10, "point_yield": 4},
    {"id": 2, "name": "Tinta acrilica 18L", "price": 289.00, "stock": 15, "store_id": 10, "point_yield": 29},
    {"id": 3, "name": "Furadeira de impacto", "price": 459.90, "stock": 4, "store_id": 20, "point_yield": 46},
    {"id": 4, "name": "Argamassa AC2", "price": 27.50, "stock": 0, "store_id": 20, "point_yield": 2},
]
PRODUCTS_BY_ID = {p["id"]: p for p in CATALOG}


@app.get("/products")
def list_products(store_id: int | None = Query(None)):
    if store_id is None:
        return CATALOG
    return [p for p in CATALOG if p["store_id"] == store_id]


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS_BY_ID.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
