from sqlalchemy import Column, String, Float, Integer, Date, CheckConstraint

from app.database import Base


class Product(Base):
    """
    Product model representing a stocked inventory item.

    Attributes:
        id: Caller-supplied product code (e.g. "P001")
        name: Product name
        category: Category used for grouping and value reports
        price: Original unit price (must be non-negative)
        quantity: Units in stock (must be non-negative)
        expiry_date: Date the stock expires, None if it never does
        discount: Discount percentage applied to the price
    """
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    expiry_date = Column("expiryDate", Date, nullable=True)
    discount = Column(Float, nullable=False, default=0)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('quantity >= 0', name='check_quantity_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id='{self.id}', category='{self.category}', quantity={self.quantity})>"
