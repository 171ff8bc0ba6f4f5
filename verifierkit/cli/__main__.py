"""
Entry point for running VerifierKit CLI as a module.

Usage: python -m verifierkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
