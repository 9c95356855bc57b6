from dotenv import load_dotenv
from flask import Flask, redirect, url_for

load_dotenv()

app = Flask(__name__)

# ---------------------------------------------------------------------------
# Register Blueprints  (production runs api/livestream.py on Vercel instead)
# ---------------------------------------------------------------------------
from routes.livestream import livestream_bp  # /api/livestream

app.register_blueprint(livestream_bp)


# ---------------------------------------------------------------------------
# Root redirect
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    return redirect(url_for("livestream.livestream"))


if __name__ == "__main__":
    app.run(host="localhost", port=5050, debug=True)
