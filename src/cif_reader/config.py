"""
CIF Reader - Configuration
==========================

Reader configuration. Values come from:
- Default values (defined here)
- Environment variables (via ReaderConfig.from_env)
- Explicit keyword arguments / command-line options

The only tunable is the refill chunk size: how many bytes the reader asks
its source for on each refill. It bounds memory use (one chunk of
unconsumed tail plus the partially filled next record) but never changes
which records are produced.
"""

from dataclasses import dataclass
import os

# Width of the content of every physical record, excluding the terminator
RECORD_WIDTH = 80

# Line terminator that must follow the 80 content bytes
RECORD_TERMINATOR = b"\n"

# Bytes consumed from the input per record
LINE_LENGTH = RECORD_WIDTH + len(RECORD_TERMINATOR)

# Default refill size: 32 KiB
DEFAULT_CHUNK_SIZE = 32 * 1024

# Environment variable consulted by ReaderConfig.from_env()
CHUNK_SIZE_ENV = "CIF_READER_CHUNK_SIZE"


@dataclass
class ReaderConfig:
    """
    Configuration for an incremental reader.

    Attributes:
        chunk_size: Bytes requested from the source per refill (default 32 KiB)
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.chunk_size, int) or isinstance(self.chunk_size, bool):
            raise TypeError(
                f"chunk_size must be an int, got {type(self.chunk_size).__name__}"
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """
        Create a ReaderConfig from environment variables.

        Environment variables (all optional):
            CIF_READER_CHUNK_SIZE: Refill size in bytes (positive integer)

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if chunk_size := os.environ.get(CHUNK_SIZE_ENV):
            try:
                value = int(chunk_size)
            except ValueError:
                value = 0
            if value > 0:
                config.chunk_size = value

        return config
