"""Main module for coppermc API.

The library turns a Minecraft version metadata file, in any of its historical schema
generations, into the resolved command line used to start the game. Fetching the
metadata, downloading libraries and spawning the process are left to the caller, see
the `manifest` and `launch` modules for the entry points.
"""

LAUNCHER_NAME = "coppermc"
LAUNCHER_VERSION = "0.3.0"
