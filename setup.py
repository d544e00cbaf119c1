from setuptools import find_packages, setup

setup(
    name="sftp-session",
    version="0.1.0",
    description="Per-operation SFTP client: upload, download, list and delete over paramiko",
    author="Daniel T Sasser II",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "paramiko>=3.0.0",
    ],
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest",
            "build",
            "twine",
        ],
    },
)
