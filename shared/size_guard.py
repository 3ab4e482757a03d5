import logging

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class InputSizeGuard:
    """Decide when input is too large to resolve in memory."""

    def __init__(self, threshold_mb=8):
        self.threshold_mb = threshold_mb

    def get_input_size_mb(self, size_bytes):
        """Convert a byte count to megabytes."""
        return size_bytes / BYTES_PER_MB

    def should_stream(self, size_bytes):
        """Check if input of the given size should be resolved from parse events."""
        size_mb = self.get_input_size_mb(size_bytes)
        stream = size_mb >= self.threshold_mb

        if stream:
            logger.warning(f"Input size ({size_mb:.1f} MB) reaches threshold ({self.threshold_mb} MB). Resolving from stream.")

        return stream
