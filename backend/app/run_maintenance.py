import asyncio
import logging

from profesiones.core.logging_config import setup_logging
from profesiones.db.database import get_database
from profesiones.service.availability_service import complete_past_appointments

logger = logging.getLogger("profesiones.maintenance")


async def main():
    setup_logging()
    logger.info("Starting appointment maintenance...")

    completed = await complete_past_appointments(get_database())

    logger.info("Maintenance completed! %s appointments closed", completed)

if __name__ == "__main__":
    asyncio.run(main())
