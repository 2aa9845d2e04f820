from pydantic import BaseModel, ConfigDict, Field

from storefront.models.customer import Customer


class CustomerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)


class CustomerAttributes(BaseModel):
    first_name: str
    last_name: str


class CustomerResource(BaseModel):
    id: str
    type: str = "customer"
    attributes: CustomerAttributes

    @classmethod
    def from_model(cls, customer: Customer) -> "CustomerResource":
        return cls(
            id=str(customer.id),
            attributes=CustomerAttributes(
                first_name=str(customer.first_name),
                last_name=str(customer.last_name),
            ),
        )


class CustomerDocument(BaseModel):
    data: CustomerResource


class CustomerListDocument(BaseModel):
    data: list[CustomerResource]
