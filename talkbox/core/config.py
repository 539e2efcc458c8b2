"""
Configuration management for talkbox.

Supports environment variables and .env files for locating model
metadata and tuning the decoder.
"""

import os
import logging
from typing import Literal, Optional
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("config")

# Load .env file if available
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
    logger.debug("Loaded .env file from %s", env_path)
else:
    # Also try loading from current directory
    load_dotenv()


class Config:
    """
    Centralized configuration for talkbox.

    Reads from environment variables with sensible defaults.
    """

    # NLU Configuration
    NLU_METADATA_PATH: Optional[str] = os.getenv("NLU_METADATA_PATH", None)
    NLU_BYTE_ORDER: Literal["little", "big"] = os.getenv("NLU_BYTE_ORDER", "little")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def load_metadata(cls, path: Optional[str] = None):
        """
        Load model metadata from `path` or NLU_METADATA_PATH.

        Raises:
            RuntimeError: if neither is set
        """
        from talkbox.core.nlu.metadata import load_metadata

        meta_path = path or cls.NLU_METADATA_PATH
        if not meta_path:
            raise RuntimeError("NLU_METADATA_PATH is not set (env or argument)")
        return load_metadata(meta_path)

    @classmethod
    def get_slot_parsers(cls):
        """
        Get the slot parser registry used for decoding.

        Returns:
            SlotParserRegistry with the built-in parsers
        """
        from talkbox.core.nlu.parsers import default_registry

        registry = default_registry()
        logger.info("Using slot parsers: %s", ", ".join(sorted(registry)))
        return registry

    @classmethod
    def configure_logging(cls):
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL, logging.INFO),
            format="[%(levelname)s] %(name)s: %(message)s",
        )

    @classmethod
    def print_config(cls):
        """Print current configuration (useful for debugging)."""
        print("\ntalkbox configuration:")
        print(f"  Metadata: {cls.NLU_METADATA_PATH or '(not set)'}")
        print(f"  Byte order: {cls.NLU_BYTE_ORDER}")
        print(f"  Log level: {cls.LOG_LEVEL}")
        print()
