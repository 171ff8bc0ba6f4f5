"""
Entry point for running VerifierKit as a module.

Usage: python -m verifierkit [command] [options]
"""

from verifierkit.cli.parser import main

if __name__ == "__main__":
    main()
