"""Setup configuration for prostate-microbiome-survival package."""
from setuptools import setup, find_packages

setup(
    name="prostate-microbiome-survival",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    package_dir={"": "."},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "scikit-learn",
        "scikit-survival",
        "lifelines",
        "joblib",
        "plotly",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "microbiome-boruta=microbiome_survival.run_selection:selection_main",
        ],
    },
)
