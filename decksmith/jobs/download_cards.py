"""
Download the card cache.

Run this job to refresh the local card cache used when no remote card
service is reachable at parse time.
"""

import asyncio
import logging

from decksmith.services.card_database import download_card_database

logger = logging.getLogger(__name__)


async def run_download() -> None:
    """Download the card cache export."""
    logger.info("Downloading card cache...")

    try:
        path = await download_card_database()
        logger.info("Downloaded card cache to %s", path)
    except Exception as e:
        logger.error("Failed to download card cache: %s", e)
        raise


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_download())


if __name__ == "__main__":
    main()
