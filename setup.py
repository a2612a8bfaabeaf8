from setuptools import setup, find_packages

main_ns = {}
with open("src/sheet_author/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)

setup(
    name="sheet-author",
    version=main_ns["__version__"],
    description="Package to author styled Excel spreadsheets",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["openpyxl", "Pillow", "pendulum", "sigfig", "enum-tools"],
    extras_require={"test": ["pytest", "pytest-check"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
