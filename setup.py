from setuptools import setup, find_packages

setup(
    name="remindermail",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
        "prometheus-client",
        "tzdata",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "remindermail-send=remindermail.cli:main",
        ],
    },
)
