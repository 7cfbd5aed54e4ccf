"""Local development entry point.

Usage:
    python run.py

Reads MAILTRAP_TOKEN and friends from a local .env file, so the contact
form can send real mail while developing.
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env before app.config reads os.environ

from app import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)
