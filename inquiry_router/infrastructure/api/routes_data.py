"""Data endpoints — load the CSV exports into the database."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException

from inquiry_router.config import settings
from inquiry_router.tools.seed_db import seed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


@router.post("/ingest")
async def ingest_csv(drop: bool = False):
    """Load engineers, rules and inquiries from CSV_DATA_PATH."""
    data_dir = Path(settings.csv_data_path)
    if not data_dir.exists():
        raise HTTPException(status_code=400, detail=f"Data directory not found: {data_dir}")

    try:
        counts = await seed(data_dir, drop=drop)
    except FileNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error ingesting CSV data")
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "ok", "counts": counts, "drop": drop}
