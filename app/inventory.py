from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from db import models
from db.store import DataStore
from app.validators import ValidationError, require_fields, to_amount

STOCK_CATEGORIES = ["Cleaning Supplies", "Chemicals", "Equipment", "Safety Gear", "Other"]
STOCK_UNITS = ["pcs", "litres", "kg", "boxes", "bottles"]


def fetch_stocks(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.STOCKS, order="item_name")


def _stock_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    require_fields(data, ["item_name", "category", "unit"], {"item_name": "Item name"})
    quantity = int(to_amount(data.get("quantity")))
    minimum = int(to_amount(data.get("minimum_stock")))
    cost = to_amount(data.get("cost_per_unit"))
    if quantity < 0 or minimum < 0 or cost < 0:
        raise ValidationError("Quantities and costs cannot be negative.")
    return {
        "item_name": str(data["item_name"]).strip(),
        "category": data["category"],
        "quantity": quantity,
        "minimum_stock": minimum,
        "cost_per_unit": cost,
        "total_value": quantity * cost,
        "unit": data["unit"],
        "supplier": (data.get("supplier") or "").strip() or None,
    }


def add_stock(store: DataStore, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.insert(models.STOCKS, _stock_row(data))


def update_stock(store: DataStore, stock_id: str, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(models.STOCKS, _stock_row(data), {"id": stock_id})


def delete_stock(store: DataStore, stock_id: str) -> None:
    store.delete(models.STOCKS, {"id": stock_id})


def is_low_stock(item: Mapping[str, Any]) -> bool:
    return to_amount(item.get("quantity")) <= to_amount(item.get("minimum_stock"))


def low_stock_items(items: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return [i for i in items if is_low_stock(i)]


def total_stock_value(items: Iterable[Mapping[str, Any]]) -> float:
    return sum(to_amount(i.get("total_value")) for i in items)
