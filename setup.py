from setuptools import setup, find_packages

def parse_requirements(requirements):
    with open(requirements) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='resourcelibrary_backend',
    version='0.1.0',
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "httpx"],
    },
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "resourcelibrary_backend": [
            "templates/*.html",
            "exceptions/error_registry.yaml",
        ],
    },
    entry_points={
        "console_scripts": [
            "resourcelibrary-server=resourcelibrary_backend.server:main",
        ],
    }
)
