import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from atsresume import create_app

app = create_app()

# --- Entrypoint ---
if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
