"""Download verified contract sources from Etherscan-style explorers."""

__version__ = "0.1.0"
