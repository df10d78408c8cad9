"""
Setup script for formcraft.

formcraft is a form builder: forms are ordered lists of typed questions
(choice, text, rating, date, file upload, ranking, matrix, categorize,
cloze, comprehension). It serves three roles:

1. Authoring - Create and edit forms from the terminal or over REST
2. Collection - Validate required answers when responses are submitted
3. Export - Flatten responses to CSV

The 'formcraft' command is the CLI entry point; the REST API runs with
'formcraft serve' or 'python main.py'.
"""

from setuptools import find_packages, setup

setup(
    name="formcraft",
    version="1.0.0",
    description="Form builder with typed questions, response validation and CSV export",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="formcraft",
    packages=find_packages(include=["formcraft", "formcraft.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # API
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
        "postgres": [
            "psycopg2-binary>=2.9.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "formcraft=formcraft.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Environment :: Web Environment",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="forms survey questionnaire cloze cli api",
)
