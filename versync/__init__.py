"""versync: keep plugin.xml, package.json and the lock file on one version."""

__version__ = "0.1.0"
