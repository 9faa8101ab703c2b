# setup.py
from setuptools import setup, find_packages

setup(
    name="sqlitekit",
    version="0.1",
    packages=find_packages(include=["sqlitekit", "sqlitekit.*"]),
    python_requires=">=3.9",
    install_requires=[
        "SQLAlchemy>=2.0",
        "python-dotenv>=1.0",
        "bcrypt>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ]
    },
)
