from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TotalBudgetUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_budget: float = Field(alias="totalBudget")


class CategoryCreate(BaseModel):
    name: str = ""
    budget: Optional[float] = None
    spent: Optional[float] = None
    color: Optional[str] = Field(default=None, pattern="^#[0-9a-fA-F]{6}$")


class CategoryUpdate(BaseModel):
    budget: Optional[float] = None
    spent: Optional[float] = None
