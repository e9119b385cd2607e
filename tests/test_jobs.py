"""Tests for the card cache download job."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from decksmith.jobs.download_cards import run_download


class TestRunDownload:
    @pytest.mark.asyncio
    async def test_run_download_success(self):
        """Test successful download."""
        with patch(
            "decksmith.jobs.download_cards.download_card_database",
            new_callable=AsyncMock,
            return_value=Path("/tmp/card-cache.json"),
        ) as mock_download:
            await run_download()

        mock_download.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_run_download_failure_propagates(self):
        """Test download errors are logged and re-raised."""
        with (
            patch(
                "decksmith.jobs.download_cards.download_card_database",
                new_callable=AsyncMock,
                side_effect=ValueError("No card service URL configured"),
            ),
            pytest.raises(ValueError),
        ):
            await run_download()
