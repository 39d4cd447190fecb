"""Monthly split and settlement calculations."""
