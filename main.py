"""
API Recommender Assistant

Usage:
    python main.py                      # interactive session
    python main.py -q "create a gold bond"
    python main.py --mode server --port 8080
"""

from api_recommender.cli import main

if __name__ == "__main__":
    main()
