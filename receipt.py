from dataclasses import dataclass
from typing import Tuple

from errors import ValidationError

required_receipt_attributes = ["retailer", "total", "items", "purchaseDate", "purchaseTime"]
required_item_attributes = ["shortDescription", "price"]


@dataclass(frozen=True)
class ReceiptItem:
    short_description: str
    price: str


@dataclass(frozen=True)
class Receipt:
    retailer: str
    purchase_date: str
    purchase_time: str
    total: str
    items: Tuple[ReceiptItem, ...]

    @classmethod
    def from_json(cls, payload) -> "Receipt":
        """
        Builds a receipt from decoded request JSON. Only the structure is checked here:
        every attribute must be present with the right type. Dates, times and amounts
        are left as text for the points calculator to interpret.
        """
        validate_receipt_json_structure(payload)
        items = tuple(ReceiptItem(item["shortDescription"], item["price"]) for item in payload["items"])
        return cls(
            retailer=payload["retailer"],
            purchase_date=payload["purchaseDate"],
            purchase_time=payload["purchaseTime"],
            total=payload["total"],
            items=items,
        )


def validate_receipt_json_structure(receipt):
    """ Validates structure of the json input """
    if not isinstance(receipt, dict):
        raise ValidationError("Error: receipt must be a JSON object")
    for attribute in required_receipt_attributes:
        if attribute not in receipt:  # check if attribute is missing
            raise ValidationError(f"Error: missing {attribute} in receipt")
        if attribute != "items" and not isinstance(receipt[attribute], str):  # check attribute type
            raise ValidationError(f"Error: invalid {attribute} format")

    if not isinstance(receipt["items"], list):
        raise ValidationError("Error: invalid receipt items list format")
    if len(receipt["items"]) < 1:  # check if the items list is empty
        raise ValidationError("Error: receipt items list is empty")
    for item in receipt["items"]:
        if not isinstance(item, dict):
            raise ValidationError("Error: invalid receipt item format")
        for attribute in required_item_attributes:
            if not isinstance(item.get(attribute), str):
                raise ValidationError("Error: invalid receipt item format")
