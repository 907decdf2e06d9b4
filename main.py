"""Entry point for running the memory album Flask application."""

from dotenv import load_dotenv

load_dotenv()

from memory_album import create_app  # noqa: E402

app = create_app()
