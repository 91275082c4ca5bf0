"""
Entry point for running the course builder CLI as a module.

Usage:
    python -m course_builder.cli outline
    python -m course_builder.cli module add "Algebra"
    python -m course_builder.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
