from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import logging
import os

from routes.scripture_api import scripture_bp

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)

app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "change-me")

# Module uploads can be tens of megabytes
app.config["MAX_CONTENT_LENGTH"] = int(os.getenv("MAX_UPLOAD_MB", "64")) * 1024 * 1024

CORS(app, supports_credentials=True)

# Register blueprints
app.register_blueprint(scripture_bp)

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5055)
