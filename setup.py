"""
Setup configuration for Market Signal Engine package
"""

from setuptools import setup, find_packages


# Read long description from README
def read_long_description():
    try:
        with open("README.md", "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        return "Statistical z-score, multi-factor risk and market regime engine for crypto market dashboards"


def get_packages():
    """
    Map src/ onto the market_signals namespace:
    src/__init__.py -> market_signals, src/stats -> market_signals.stats, ...
    """
    base_packages = find_packages(where="src", exclude=["*.egg-info", "__pycache__"])
    return ["market_signals"] + [f"market_signals.{pkg}" for pkg in base_packages]


setup(
    name="market-signal-engine",
    version="1.0.0",
    author="Market Signals Team",
    description="Z-score statistics, multi-factor risk composition and macro regime classification for crypto market intelligence",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=get_packages(),
    package_dir={
        "market_signals": "src",
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21.0",
        "pandas>=1.3.0",
        "numba>=0.56.0",
        "scipy>=1.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    include_package_data=True,
    package_data={
        "market_signals": ["py.typed"],
    },
    zip_safe=False,
    keywords=[
        "crypto", "market-regime", "z-score", "risk", "macro",
        "vix", "dxy", "m2", "quantitative-finance",
    ],
)
