"""HTTP surface of the backend (aiohttp)."""
