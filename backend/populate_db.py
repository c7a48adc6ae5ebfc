import os
import sys
import random
from datetime import datetime, timedelta, timezone

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.product import Product
from models.customer import Customer
from models.order import Order, OrderStatus
from schemas.order import OrderCreate
from services.orders import create_order

# Configuration
CATEGORIES = ["Eletrônicos", "Ferramentas", "Papelaria", "Casa", "Alimentos"]
CITIES = [("São Paulo", "SP"), ("Rio de Janeiro", "RJ"), ("Curitiba", "PR"), ("Recife", "PE")]
LIMIT_PRODUCTS = 40
LIMIT_CUSTOMERS = 15
LIMIT_ORDERS = 120
ORDER_HISTORY_DAYS = 365
# End Configuration

def load_demo_data(user_id: str, seed: int = 42):
    """Fills the database with demo products, customers and orders owned by `user_id`."""
    rng = random.Random(seed)
    session = SessionLocal()
    try:
        if session.query(Product).filter(Product.user_id == user_id).first():
            print(f"Użytkownik {user_id} ma już dane, pomijam.")
            return

        products = []
        for i in range(LIMIT_PRODUCTS):
            category = rng.choice(CATEGORIES)
            products.append(Product(
                name=f"{category} - Modelo {i + 1:03d}",
                description=f"Produto de demonstração {i + 1}",
                price=round(rng.uniform(5.0, 500.0), 2),
                category=category,
                stock_quantity=rng.randint(0, 200),
                sku=f"SKU-{i + 1:05d}",
                user_id=user_id,
            ))
        session.add_all(products)

        customers = []
        for i in range(LIMIT_CUSTOMERS):
            city, state = rng.choice(CITIES)
            customers.append(Customer(
                name=f"Cliente {i + 1}",
                email=f"cliente{i + 1}@example.com",
                city=city,
                state=state,
                country="Brazil",
                user_id=user_id,
            ))
        session.add_all(customers)
        session.commit()
        print(f"Dodano {len(products)} produktów i {len(customers)} klientów.")

        # Orders go through the regular pricing path, then get back-dated
        now = datetime.now(timezone.utc)
        statuses = list(OrderStatus)
        for _ in range(LIMIT_ORDERS):
            picked = rng.sample(products, k=rng.randint(1, 4))
            payload = OrderCreate(
                customer_id=rng.choice(customers).id,
                items=[{"product_id": p.id, "quantity": rng.randint(1, 5)} for p in picked],
            )
            order = create_order(session, user_id, payload)
            order.created_at = now - timedelta(days=rng.randint(0, ORDER_HISTORY_DAYS))
            order.status = rng.choice(statuses)
        session.commit()

        total = session.query(Order).filter(Order.user_id == user_id).count()
        print(f"Zamówień w bazie: {total}")
    finally:
        session.close()

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Użycie: python populate_db.py <user_id>")
        sys.exit(1)
    init_db()
    load_demo_data(sys.argv[1])
