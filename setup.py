from setuptools import setup, find_packages

setup(
    name="boostnets",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy>=1.26",
        "pandas>=2.0",
        "scikit-learn>=1.3",
        "lightgbm>=4.0",
        "matplotlib>=3.10.7",
        "seaborn>=0.13",
        "tensorflow>=2.20.0",
        "absl-py>=2.0",
        "tqdm>=4.66.0",
        "pillow>=10.0.0",
        "imageio>=2.16",
    ],
    extras_require={"test": ["pytest>=8.0"]},
    python_requires=">=3.10",
)
