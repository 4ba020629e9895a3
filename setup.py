from setuptools import setup, find_packages

setup(
    name="resterr",
    version="1.0.0",
    description="Translate application errors into JSON REST responses",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "starlette>=0.27.0",
        "uvicorn>=0.23.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "resterr-demo=resterr.http_server:main",
        ],
    },
)
