import asyncio
from typing import Callable, Optional

from logger import bind_context
from iwems.budget import BudgetStorage, BudgetTracker, export_document, export_filename
from iwems.exceptions import LocalStoreError
from iwems.screens import ScreenController

logger = bind_context(component="budget")


class BudgetScreen(ScreenController):
    """Budget tracker screen; its document lives in local storage, not in Supabase.

    Loading (re)reads the stored document, so a mutation's reload shows what
    was actually persisted.
    """

    screen = "/budget"
    load_errors = {"budget": "Failed to load budget"}

    def __init__(self, session_store, data_client, decision=None, local_store=None):
        super().__init__(session_store, data_client, decision)
        self.storage = BudgetStorage(local_store)
        self.tracker: Optional[BudgetTracker] = None
        # Outcome of this screen's last save; the reload builds a fresh tracker.
        self.last_save: Optional[dict] = None

    async def _load_budget(self):
        self.tracker = await asyncio.to_thread(BudgetTracker, self.storage)
        return {"status": "success", "data": self.tracker.summary()}

    def loaders(self):
        return {"budget": self._load_budget}

    def row_count(self) -> int:
        return len(self.tracker.data.categories) if self.tracker else 0

    def view_data(self):
        return {
            **self.data,
            "storage_method": self.storage.local_store.backend,
            "last_save": self.last_save,
        }

    async def _change(self, change: Callable[[BudgetTracker], object], success_message: str, failure_message: str) -> bool:
        async def _apply():
            try:
                await asyncio.to_thread(change, self.tracker)
            except LocalStoreError as e:
                return {"status": "error", "error": str(e)}
            saved = self.tracker.last_save
            self.last_save = saved
            if saved is not None and not saved.get("success"):
                return {"status": "error", "error": "budget could not be saved"}
            return {"status": "success"}

        if self.tracker is None:
            self.tracker = await asyncio.to_thread(BudgetTracker, self.storage)
        return await self.mutate(_apply, success_message, failure_message)

    async def set_total_budget(self, amount: float) -> bool:
        logger.info(f"BudgetScreen: setting total budget to {amount}")
        return await self._change(lambda t: t.set_total_budget(amount), "Budget updated", "Failed to save budget")

    async def add_category(self, name: str, budget: Optional[float], spent: Optional[float] = None, color: Optional[str] = None) -> bool:
        logger.info(f"BudgetScreen: adding category {name!r} with budget {budget}")
        return await self._change(
            lambda t: t.add_category(name, budget, spent, color), "Category added", "Failed to save category"
        )

    async def edit_category(self, category_id: int, budget: Optional[float], spent: Optional[float]) -> bool:
        return await self._change(
            lambda t: t.edit_category(category_id, budget, spent), "Category updated", "Failed to save category"
        )

    async def delete_category(self, category_id: int) -> bool:
        logger.info(f"BudgetScreen: deleting category {category_id}")
        return await self._change(lambda t: t.delete_category(category_id), "Category deleted", "Failed to save budget")

    async def reset(self) -> bool:
        logger.warning("BudgetScreen: resetting budget to defaults")
        return await self._change(lambda t: t.reset(), "Data has been reset to defaults", "Failed to reset budget")

    async def test_storage(self) -> dict:
        result = await asyncio.to_thread(self.storage.test_storage)
        self.notify("success" if result["success"] else "error", result["message"])
        return result

    def export(self):
        """The export document and the attachment file name for it."""
        return export_document(self.tracker.data), export_filename()
