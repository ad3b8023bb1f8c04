"""Budget tracker kept in on-device storage instead of the shared store.

The document under ``wedding-budget-data`` is
``{"totalBudget": n, "categories": [{"id", "name", "budget", "spent", "color"}]}``.
There is no conflict resolution: the last save on a device wins.
"""
import json
import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import BUDGET_STORAGE_KEY
from iwems.exceptions import LocalStoreError, ValidationFailed

STORAGE_TEST_KEY = "test-key"


class BudgetCategory(BaseModel):
    id: int
    name: str
    budget: float
    spent: float
    color: str


class BudgetData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_budget: float = Field(alias="totalBudget")
    categories: List[BudgetCategory] = []

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def default_budget() -> BudgetData:
    return BudgetData(
        total_budget=60000,
        categories=[
            BudgetCategory(id=1, name="Venue", budget=15000, spent=12000, color="#3b82f6"),
            BudgetCategory(id=2, name="Catering", budget=20000, spent=18500, color="#10b981"),
            BudgetCategory(id=3, name="Photography", budget=5000, spent=5000, color="#8b5cf6"),
            BudgetCategory(id=4, name="Flowers", budget=3000, spent=2800, color="#ec4899"),
            BudgetCategory(id=5, name="Music", budget=4000, spent=3500, color="#f59e0b"),
            BudgetCategory(id=6, name="Attire", budget=8000, spent=4000, color="#ef4444"),
            BudgetCategory(id=7, name="Invitations", budget=2000, spent=1500, color="#06b6d4"),
            BudgetCategory(id=8, name="Decorations", budget=3000, spent=0, color="#84cc16"),
        ],
    )


def random_color() -> str:
    return f"#{random.randint(0, 0xFFFFFF):06x}"


class BudgetStorage:
    """Save/load pair for the budget document."""

    def __init__(self, local_store, key: str = BUDGET_STORAGE_KEY):
        self.local_store = local_store
        self.key = key

    def save(self, data: BudgetData) -> Dict[str, Any]:
        try:
            self.local_store.set_item(self.key, json.dumps(data.to_document()))
        except LocalStoreError as e:
            logging.error(f"BudgetStorage.save failed: {e}")
            return {"success": False, "method": "none"}
        logging.debug(f"BudgetStorage: saved {len(data.categories)} categories")
        return {"success": True, "method": self.local_store.backend}

    def load(self) -> BudgetData:
        try:
            stored = self.local_store.get_item(self.key)
            if stored:
                return BudgetData.model_validate(json.loads(stored))
        except (LocalStoreError, json.JSONDecodeError, ValidationError) as e:
            logging.warning(f"BudgetStorage.load failed, falling back to defaults: {e}")
        return default_budget()

    def clear(self) -> None:
        self.local_store.remove_item(self.key)
        logging.info("BudgetStorage: storage cleared")

    def test_storage(self) -> Dict[str, Any]:
        """Write, read back and delete a sample value."""
        sample = json.dumps({"test": "value", "timestamp": int(time.time() * 1000)})
        try:
            self.local_store.set_item(STORAGE_TEST_KEY, sample)
            retrieved = self.local_store.get_item(STORAGE_TEST_KEY)
            self.local_store.remove_item(STORAGE_TEST_KEY)
        except LocalStoreError as e:
            return {"success": False, "message": f"Storage error: {e}"}
        if retrieved != sample:
            return {"success": False, "message": "Storage test failed."}
        return {"success": True, "message": "Storage is working. Budget changes are being saved."}


# --- derived numbers ---

def total_spent(data: BudgetData) -> float:
    return sum(c.spent for c in data.categories)


def remaining(data: BudgetData) -> float:
    return data.total_budget - total_spent(data)


def percent_used(data: BudgetData) -> float:
    if data.total_budget <= 0:
        return 0.0
    return 100 * total_spent(data) / data.total_budget


def category_summary(category: BudgetCategory) -> Dict[str, Any]:
    percent = 100 * category.spent / category.budget if category.budget > 0 else 0.0
    left = category.budget - category.spent
    return {
        **category.model_dump(),
        "percentUsed": round(percent, 1),
        "remaining": abs(left),
        "overBudget": left < 0,
    }


def budget_summary(data: BudgetData) -> Dict[str, Any]:
    used = percent_used(data)
    return {
        "totalBudget": data.total_budget,
        "totalSpent": total_spent(data),
        "remaining": remaining(data),
        "percentUsed": round(used, 1),
        "percentAvailable": round(100 - used, 1),
        "progress": min(used, 100.0),
        "categories": [category_summary(c) for c in data.categories],
    }


def export_document(data: BudgetData, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {**data.to_document(), "exportedAt": now.isoformat().replace("+00:00", "Z")}


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"budget-tracker-{now.date().isoformat()}.json"


class BudgetTracker:
    """Every edit is applied to the loaded document and saved straight away."""

    def __init__(self, storage: BudgetStorage):
        self.storage = storage
        self.data = storage.load()
        self.last_save: Optional[Dict[str, Any]] = None

    def _save(self) -> Dict[str, Any]:
        self.last_save = self.storage.save(self.data)
        return self.last_save

    def set_total_budget(self, amount: float) -> Dict[str, Any]:
        if amount is None or amount <= 0:
            raise ValidationFailed("totalBudget", "Please enter a valid budget amount greater than 0")
        self.data = self.data.model_copy(update={"total_budget": float(amount)})
        return self._save()

    def add_category(self, name: str, budget: Optional[float], spent: Optional[float] = None, color: Optional[str] = None) -> BudgetCategory:
        if not name or not name.strip() or not budget:
            raise ValidationFailed("name", "Please enter a category name and budget")
        if budget < 0 or (spent or 0) < 0:
            raise ValidationFailed("budget", "Amounts cannot be negative")
        category_id = int(time.time() * 1000)
        existing = {c.id for c in self.data.categories}
        while category_id in existing:
            category_id += 1
        category = BudgetCategory(
            id=category_id,
            name=name.strip(),
            budget=float(budget),
            spent=float(spent or 0),
            color=color or random_color(),
        )
        self.data = self.data.model_copy(update={"categories": [*self.data.categories, category]})
        self._save()
        return category

    def edit_category(self, category_id: int, budget: Optional[float], spent: Optional[float]) -> BudgetCategory:
        if (budget or 0) < 0 or (spent or 0) < 0:
            raise ValidationFailed("budget", "Amounts cannot be negative")
        updated = None
        categories = []
        for c in self.data.categories:
            if c.id == category_id:
                updated = c.model_copy(update={"budget": float(budget or 0), "spent": float(spent or 0)})
                categories.append(updated)
            else:
                categories.append(c)
        if updated is None:
            raise KeyError(category_id)
        self.data = self.data.model_copy(update={"categories": categories})
        self._save()
        return updated

    def delete_category(self, category_id: int) -> None:
        categories = [c for c in self.data.categories if c.id != category_id]
        if len(categories) == len(self.data.categories):
            raise KeyError(category_id)
        self.data = self.data.model_copy(update={"categories": categories})
        self._save()

    def reset(self) -> None:
        self.storage.clear()
        self.data = self.storage.load()

    def summary(self) -> Dict[str, Any]:
        return budget_summary(self.data)
