"""Create the dashboard tables and load placeholder data.

Run with ``python -m app.seed``; rows that already exist are left alone.
"""

import asyncio
import logging
from datetime import date
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from app.auth.infrastructure.security.passwords import hash_password
from app.core.config import settings
from app.shared.infrastructure.logging.structured_logger import configure_json_logging
from app.shared.infrastructure.persistence.postgres.schema import create_schema

logger = logging.getLogger(__name__)

USERS: list[dict[str, Any]] = [
    {
        "id": "410544b2-4001-4271-9855-fec4b6a6442a",
        "name": "User",
        "email": "user@nextmail.com",
        "password": "123456",
    },
]

CUSTOMERS: list[dict[str, Any]] = [
    {
        "id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        "name": "Evil Rabbit",
        "email": "evil@rabbit.com",
        "image_url": "/customers/evil-rabbit.png",
    },
    {
        "id": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
        "name": "Delba de Oliveira",
        "email": "delba@oliveira.com",
        "image_url": "/customers/delba-de-oliveira.png",
    },
    {
        "id": "3958dc9e-742f-4377-85e9-fec4b6a6442a",
        "name": "Lee Robinson",
        "email": "lee@robinson.com",
        "image_url": "/customers/lee-robinson.png",
    },
]

INVOICES: list[dict[str, Any]] = [
    {
        "id": "6f0b3b8e-1f0f-4a8c-9a53-0b7b0f6a1c01",
        "customer_id": CUSTOMERS[0]["id"],
        "amount": 15795,
        "status": "pending",
        "date": "2022-12-06",
    },
    {
        "id": "6f0b3b8e-1f0f-4a8c-9a53-0b7b0f6a1c02",
        "customer_id": CUSTOMERS[1]["id"],
        "amount": 20348,
        "status": "pending",
        "date": "2022-11-14",
    },
    {
        "id": "6f0b3b8e-1f0f-4a8c-9a53-0b7b0f6a1c03",
        "customer_id": CUSTOMERS[2]["id"],
        "amount": 3040,
        "status": "paid",
        "date": "2022-10-29",
    },
]


async def seed(connection: asyncpg.Connection) -> None:
    async with connection.transaction():
        await create_schema(connection)
        for user in USERS:
            password_hash = await asyncio.to_thread(hash_password, user["password"])
            await connection.execute(
                "INSERT INTO users (id, name, email, password) VALUES ($1, $2, $3, $4) "
                "ON CONFLICT (id) DO NOTHING",
                user["id"],
                user["name"],
                user["email"],
                password_hash,
            )
        await connection.executemany(
            "INSERT INTO customers (id, name, email, image_url) VALUES ($1, $2, $3, $4) "
            "ON CONFLICT (id) DO NOTHING",
            [
                (customer["id"], customer["name"], customer["email"], customer["image_url"])
                for customer in CUSTOMERS
            ],
        )
        await connection.executemany(
            "INSERT INTO invoices (id, customer_id, amount, status, date) "
            "VALUES ($1, $2, $3, $4, $5) ON CONFLICT (id) DO NOTHING",
            [
                (
                    invoice["id"],
                    invoice["customer_id"],
                    invoice["amount"],
                    invoice["status"],
                    date.fromisoformat(invoice["date"]),
                )
                for invoice in INVOICES
            ],
        )
    logger.info(
        "database_seeded users=%s customers=%s invoices=%s",
        len(USERS),
        len(CUSTOMERS),
        len(INVOICES),
    )


async def main() -> None:
    configure_json_logging(settings.log_level)
    connection = await asyncpg.connect(settings.database_url)
    try:
        await seed(connection)
    finally:
        await connection.close()


if __name__ == "__main__":
    asyncio.run(main())
