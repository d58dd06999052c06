"""tonpack: release packaging for the ton_client native library."""

from tonpack.__version__ import __version__
