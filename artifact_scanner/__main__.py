#!/usr/bin/env python3
"""
Entry point script for artifact-scanner CLI.
Can be used directly: python -m artifact_scanner
"""

if __name__ == "__main__":
    from artifact_scanner.cli.main import main
    import sys
    sys.exit(main())
