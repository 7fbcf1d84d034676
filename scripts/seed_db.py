import asyncio
from datetime import datetime, timezone
from prisma import Prisma

from app.core.config import settings
from app.services.qr_codec import QRCodec


DISHES = [
    {'name': 'Poulet DG', 'description': 'Poulet sauté aux plantains et légumes', 'price': 2500},
    {'name': 'Ndolé', 'description': 'Feuilles de ndolé, arachides et crevettes', 'price': 3000},
    {'name': 'Poisson braisé', 'description': 'Bar braisé, bâton de manioc', 'price': 3500},
    {'name': 'Jus de bissap', 'description': 'Fleurs d\'hibiscus, menthe', 'price': 500},
    {'name': 'Jus de gingembre', 'description': 'Gingembre frais, citron', 'price': 500},
]

USERS = [
    {'email': 'admin@akounamatata.com', 'role': 'admin'},
    {'email': 'client@akounamatata.com', 'role': 'client'},
]


async def main():
    db = Prisma()
    await db.connect()
    codec = QRCodec()

    print("Starting database seeding...")

    # 1. Tables, each with its QR code
    existing_tables = await db.table.find_many()
    if existing_tables:
        print(f"Found {len(existing_tables)} existing tables, skipping")
    else:
        for number in range(1, 11):
            table = await db.table.create({
                'restaurantId': settings.DEFAULT_RESTAURANT_ID,
                'number': str(number),
                'capacity': 2 if number <= 4 else 4,
            })
            token = codec.build_token(table.id, table.number)
            await db.table.update(where={'id': table.id}, data={'qrCode': token})
            print(f"Created table {table.number}: {token}")

    # 2. Dishes
    dishes = await db.dish.find_many()
    if dishes:
        print(f"Found {len(dishes)} existing dishes, skipping")
    else:
        for dish_data in DISHES:
            dish = await db.dish.create({**dish_data, 'isAvailable': True})
            dishes.append(dish)
            print(f"Created dish: {dish.name} ({dish.price} {settings.CURRENCY})")

    # 3. Today's menu
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    menu = await db.menuoftheday.find_first(where={'date': today})
    if menu is None:
        menu = await db.menuoftheday.create({
            'title': 'Menu du jour',
            'date': today,
            'isActive': True,
            'dishIds': [dish.id for dish in dishes[:3]],
        })
        print(f"Created menu of the day: {menu.id}")

    # 4. Users (tokens are issued by the auth service)
    for user_data in USERS:
        user = await db.user.find_unique(where={'email': user_data['email']})
        if user is None:
            user = await db.user.create(user_data)
            print(f"Created {user.role}: {user.email} ({user.id})")

    print("Seeding completed")
    await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
