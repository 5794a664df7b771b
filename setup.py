# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="hdeploy",
    version="0.3.0",
    description="Empaqueta un proyecto compilado y sus dependencias en un jar de trabajo para Hadoop",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["hdeploy", "hdeploy.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'hdeploy=hdeploy.interface.cli.app:main',  # Empaquetado vía CLI
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
