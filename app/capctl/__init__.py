"""capctl - manage cargo-installed packages against crates.io."""

__version__ = "0.3.0"
