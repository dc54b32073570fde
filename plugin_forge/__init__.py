"""Plugin Forge -- AI-assisted Spigot plugin project generator.

Turns a plugin name, version and behaviour description into a complete Maven
project (Java source stub, ``plugin.yml``, ``pom.xml`` and ``README.md``)
packaged as a single zip archive.
"""

__version__ = "0.1.0"
