"""Setup configuration for trello_cycle_time"""

from setuptools import setup, find_packages

setup(
    name="trello-cycle-time",
    version="0.1.0",
    description=(
        "CLI tool for Trello card cycle times: creation to start, start to "
        "completion and creation to completion."
    ),
    author="Trello Cycle Time Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "trello-cycle-time=trello_cycle_time.main:main",
        ],
    },
)
