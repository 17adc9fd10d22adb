"""
qoracle Setup
"""

from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setup(
    name="qoracle",
    version="1.0.0",
    author="qoracle",
    description="Quantum-random Telegram oracle: gematria phrases and numerology readings",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"qoracle": ["data/*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.25.0",
        "python-telegram-bot>=20.7",
        "python-dotenv>=1.0.0",
        "openai>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-timeout>=2.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "qoracle-bot=qoracle.bot.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Chat",
    ],
    keywords="telegram bot qrng quantum random gematria numerology",
)
