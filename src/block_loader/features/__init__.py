"""Feature modules for block-loader."""
