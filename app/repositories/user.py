from app.repositories.base import PrismaRepository, storage_errors


class UserRepository(PrismaRepository):

    async def append_order_to_history(self, user_id: str, order_id: str) -> bool:
        """
        Push `order_id` onto the user's order history unless already present.

        Returns False when nothing changed (already linked, or unknown user),
        which makes retries safe.
        """
        with storage_errors("user.append_order_to_history", user_id=user_id, order_id=order_id):
            count = await self.db.user.update_many(
                where={"id": user_id, "NOT": [{"orderHistory": {"has": order_id}}]},
                data={"orderHistory": {"push": [order_id]}}
            )
        return count == 1
