from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fp:
    long_description = fp.read()

setup(
    name="coppermc",
    version="0.3.0",
    description="CopperMC is a module that parses every generation of Minecraft version metadata and "
                "resolves the game's command line, with an executable script to run the CopperMC CLI.",
    author="CopperMC contributors",
    packages=["coppermc", "coppermc.cli"],
    python_requires=">=3.8",
    install_requires=["pydantic>=2.0"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["coppermc = coppermc.cli:main"]},
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GPL-3.0",
)
