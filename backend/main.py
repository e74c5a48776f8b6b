"""Entry point for running the context graph API."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from src.services.config import get_config

if __name__ == "__main__":
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger(__name__).info(
        "Serving context graph",
        extra={"document_store_path": str(config.document_store_path or "")},
    )

    # PORT=7860 python main.py
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
    )
