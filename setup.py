"""Setup script for the GoldSignal package."""

from setuptools import setup, find_packages

# Read README with explicit UTF-8 encoding
with open("README.md", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="goldsignal",
    version="0.1.0",
    packages=find_packages(include=["goldsignal", "goldsignal.*"]),
    install_requires=[
        "python-dotenv",
        "structlog",
        "pydantic>=2.0",
        "pyyaml",
        "telethon",
        "aiohttp",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "goldsignal=goldsignal.main:main",
        ],
    },
    python_requires=">=3.8",
    author="GoldSignal Team",
    description="Telegram gold trading signal bot with milestone updates",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Financial and Insurance Industry",
        "Programming Language :: Python :: 3",
        "Topic :: Office/Business :: Financial :: Investment",
    ],
)
