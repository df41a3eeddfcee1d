from setuptools import setup


setup(
    name="cost-import",
    version="0.1.0",
    description="Validate loosely structured spreadsheet cost exports into exact, import-ready cost rows",
    packages=["cost_import"],
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "cost-import=cost_import.cli:main",
        ]
    },
)
