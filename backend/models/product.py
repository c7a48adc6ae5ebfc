# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, CheckConstraint, func
from database import Base

# Model Product
# A catalogue entry owned by a single user: price, category, stock level
# and an active flag that controls whether it shows up in dashboard counters.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)
    category = Column(String, nullable=False, index=True)
    sku = Column(String, nullable=True)

    # Price and stock are guarded by database constraints as well.
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)

    # Identifier issued by the external identity service.
    user_id = Column(String, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
