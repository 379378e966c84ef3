"""Setup configuration for the guild panel backend."""

from setuptools import setup, find_packages

setup(
    name="guildpanel",
    version="0.0.1",
    description="Settings API and config bootstrap for a Discord bot's web panel",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "aiohttp>=3.9",
        "aiosqlite>=0.19",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "guildpanel=guildpanel.main:main",
        ],
    },
)
