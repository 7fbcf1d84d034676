from typing import List, Optional, Sequence

from app.models.menu import Dish, MenuOfTheDay
from app.repositories.base import PrismaRepository, storage_errors


class CatalogRepository(PrismaRepository):
    """Read-only view of dishes and menus owned by the catalog module."""

    async def find_dish_by_id(self, dish_id: str) -> Optional[Dish]:
        with storage_errors("dish.get", dish_id=dish_id):
            record = await self.db.dish.find_unique(where={"id": dish_id})
        return Dish.model_validate(record) if record else None

    async def find_dishes_by_ids(self, dish_ids: Sequence[str]) -> List[Dish]:
        if not dish_ids:
            return []
        with storage_errors("dish.find_many", count=len(dish_ids)):
            records = await self.db.dish.find_many(where={"id": {"in": list(dish_ids)}})
        return [Dish.model_validate(r) for r in records]

    async def find_menu_of_the_day(self, menu_id: str) -> Optional[MenuOfTheDay]:
        with storage_errors("menu_of_the_day.get", menu_id=menu_id):
            record = await self.db.menuoftheday.find_unique(where={"id": menu_id})
        return MenuOfTheDay.model_validate(record) if record else None
