"""Node-RED Node Packager.

Packs a Node-RED library (from the npm registry or a local directory) into a
single tarball for palette import on hosts without registry access:
- node_modules bundled into the archive
- node-gyp rebuild hooks removed from native components
- prebuilds checked for linux-arm64 and linux-x64
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
