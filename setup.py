from setuptools import find_packages, setup

setup(
    name="workout_tracker",
    version="0.1.0",
    packages=find_packages(include=["workout_tracker", "workout_tracker.*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "python-dotenv",
        "couchdb",
        "cryptography",
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
