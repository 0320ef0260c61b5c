from setuptools import setup, find_packages

setup(
    name="marketcap-rebalancer",
    version="1.0.0",
    author="Marketcap Rebalancer Team",
    description="Market cap weighted portfolio rebalancing strategy",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "exchange_connector_base": ["py.typed"],
        "rebalance_calculator": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "aiohttp==3.12.15",
        "PyYAML==6.0.2",
        "APScheduler>=3.10,<4",
        "dependency-injector>=4.41",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "marketcap-rebalancer=strategy_runner.main:main",
        ],
    },
    python_requires=">=3.11",
)
