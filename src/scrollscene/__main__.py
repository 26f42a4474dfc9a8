"""Command-line interface."""
from scrollscene.main import main

if __name__ == "__main__":
    main()
