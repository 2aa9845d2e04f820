from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.models.customer import Customer
from storefront.models.invoice import Invoice
from storefront.schemas.customer import CustomerCreate


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, customer_id: int) -> Customer | None:
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_by_merchant_id(self, merchant_id: int) -> list[Customer]:
        """Customers with at least one invoice at the merchant."""
        return (
            self.db.query(Customer)
            .filter(
                Customer.id.in_(
                    select(Invoice.customer_id).where(Invoice.merchant_id == merchant_id)
                )
            )
            .order_by(Customer.id.asc())
            .all()
        )

    def create(self, data: CustomerCreate) -> Customer:
        customer = Customer(**data.model_dump())
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer
