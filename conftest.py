"""Root conftest: puts the project root on sys.path for in-tree test runs."""
