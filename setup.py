from setuptools import setup, find_packages

setup(
    name="lumen",
    version="0.1.0",
    description="Lumen - natural-language photo query interpretation for agent actions",
    packages=find_packages(include=["Lumen", "Lumen.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Validation
        "pydantic>=2.0.0",

        # Network
        "requests>=2.28.0",

        # Web framework
        "flask>=2.3.0",
        "flask-cors>=3.0.10",
        "gunicorn>=20.0.0",
        "python-dotenv>=0.19.0",

        # Testing
        "pytest>=7.0.0",
    ],
    extras_require={
        "dev": [
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "lumen-repl=Lumen.cli.repl:main",
            "lumen-api=Lumen.api.server:run_server",
        ],
    },
)
