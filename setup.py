from setuptools import setup, find_packages

setup(
    name="mathpuzzle",
    version="1.0.0",
    description="Maths Puzzle Solver: sum-or-product headers, distinct lines, shared diagonal",
    author="robomotic",
    packages=find_packages(include=["mathpuzzle", "mathpuzzle.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21.0",
        "tqdm>=4.62.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "mathpuzzle=mathpuzzle.cli:main",
        ],
    },
)
