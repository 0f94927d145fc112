"""Setup pour DSN ESG Assistant."""

from setuptools import setup, find_packages

setup(
    name="dsn_esg_assistant",
    version="1.0.0",
    description="Indicateurs ESRS S1-6 (effectifs) calcules a partir des declarations DSN",
    author="AJ",
    python_requires=">=3.10",
    packages=find_packages(include=["dsn_esg_assistant", "dsn_esg_assistant.*"]),
    package_data={
        "dsn_esg_assistant": ["data/*.csv", "reporting/templates/*.html"],
    },
    entry_points={
        "console_scripts": [
            "dsn-esg-assistant=dsn_esg_assistant.main:main",
        ],
    },
    install_requires=[
        "pydantic>=2.0",
        "openpyxl>=3.1.0",
        "jinja2>=3.1.0",
        "fastapi>=0.100.0",
        "python-multipart>=0.0.6",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.24.0",
        ],
    },
)
