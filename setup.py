# setup.py
from setuptools import setup, find_packages

setup(
    name="url_spider",
    version="0.1.0",
    description="Sequential same-origin BFS crawler that builds a sitemap",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"url_spider": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "tldextract>=5.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "url-spider=url_spider.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
