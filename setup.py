from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="optix-watchlist",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported by
    # its layer name (`import domain`, `import application`, ...).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=[
            "domain",
            "domain.*",
            "application",
            "application.*",
            "infrastructure",
            "infrastructure.*",
            "config",
            "config.*",
            "runtime",
            "runtime.*",
        ],
    ),
    package_data={"domain.watchlist": ["genres.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.9",
        "pydantic==2.10.6",
        "python-dotenv>=1.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
)
