from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt


class OrderLineRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: StrictInt = Field(alias="itemId")
    quantity: StrictInt = Field(gt=0)


class PlaceOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    supplier_id: StrictInt = Field(alias="supplierId")
    items: List[OrderLineRequest] = Field(min_length=1)
    delivery_address: str = Field(default="", alias="deliveryAddress")
    payment_method: str = Field(default="cash", alias="paymentMethod")


class UpdateStatusRequest(BaseModel):
    status: Optional[str] = None
