from loguru import logger

from app.shared.config import config
from app.shared.storage.mongo import get_mongo_client
from app.schemas.init import init_beanie_odm

MONGO_LABEL = "default"


async def init_schema():
    mongo_client = get_mongo_client(MONGO_LABEL)
    db_name = config.get("MONGO_DATABASE", "streamhub")
    logger.info(f"Initializing Beanie on database {db_name}")
    await init_beanie_odm(mongo_client, db_name)


if __name__ == "__main__":
    import asyncio

    asyncio.run(init_schema())
